"""
Precifix Server - Payment Method Models
Formas de pagamento e taxas por parcela do cartao de credito
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Float, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from precifix.database import Base
from precifix.core.pricing import PaymentMethodForCalculation, PaymentMethodType

MAX_INSTALLMENTS = 12


class PaymentMethod(Base):
    """Forma de pagamento configurada pelo usuario"""
    __tablename__ = "payment_methods"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False, default=PaymentMethodType.CASH.value)
    rate = Column(Float, default=0)  # Taxa % (debito)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    installments = relationship(
        "PaymentMethodInstallment",
        back_populates="payment_method",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="PaymentMethodInstallment.installments"
    )

    def for_calculation(self) -> PaymentMethodForCalculation:
        return PaymentMethodForCalculation(
            type=PaymentMethodType(self.type),
            rate=self.rate or 0.0,
            installments={i.installments: i.rate or 0.0 for i in self.installments or []},
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "rate": self.rate,
            "is_active": self.is_active,
            "installments": [i.to_dict() for i in self.installments or []],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class PaymentMethodInstallment(Base):
    """Taxa do cartao de credito para N parcelas (1 a 12)"""
    __tablename__ = "payment_method_installments"
    __table_args__ = (
        UniqueConstraint('payment_method_id', 'installments', name='uq_payment_method_installments'),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    payment_method_id = Column(String(36), ForeignKey("payment_methods.id", ondelete="CASCADE"), nullable=False)
    payment_method = relationship("PaymentMethod", back_populates="installments")

    installments = Column(Integer, nullable=False)
    rate = Column(Float, default=0)

    def to_dict(self):
        return {
            "installments": self.installments,
            "rate": self.rate,
        }
