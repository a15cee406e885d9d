"""
Precifix Server - Quote Model
Orcamentos e vendas (uma venda e um orcamento fechado)
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Boolean, DateTime, Date, Text, Float, Integer, ForeignKey, JSON

from precifix.database import Base


class QuoteStatus(str, Enum):
    """Status do orcamento"""
    PENDING = "pending"      # Aguardando resposta do cliente
    ACCEPTED = "accepted"    # Aceito / agendado
    REJECTED = "rejected"    # Recusado ou nao realizado
    CLOSED = "closed"        # Venda concluida


QUICK_SALE_CLIENT_NAME = "Consumidor Final"
QUICK_SALE_VEHICLE = "N/A"


class Quote(Base):
    """Modelo de Orcamento/Venda"""
    __tablename__ = "quotes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Cliente / veiculo (referencia + copia dos dados no momento do orcamento)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"), index=True)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="SET NULL"))
    client_name = Column(String(255), nullable=False)
    vehicle = Column(String(255))
    client_document = Column(String(20))
    client_phone = Column(String(20))
    client_email = Column(String(255))
    client_address = Column(String(255))
    client_address_number = Column(String(20))
    client_complement = Column(String(100))
    client_city = Column(String(100))
    client_state = Column(String(2))
    client_zip_code = Column(String(10))

    # Servicos (copia dos servicos com overrides do orcamento)
    services_summary = Column(JSON, default=list)

    # Valores
    subtotal = Column(Float, default=0)        # Soma dos servicos
    discount_value = Column(Float, default=0)  # Desconto calculado
    discount_type = Column(String(20), default="amount")
    discount_input = Column(Float, default=0)
    commission_value = Column(Float, default=0)
    commission_type = Column(String(20), default="amount")
    commission_input = Column(Float, default=0)
    other_costs_global = Column(Float, default=0)
    total_price = Column(Float, default=0)     # Valor cobrado (apos desconto)
    payment_fee = Column(Float, default=0)
    total_cost = Column(Float, default=0)
    net_profit = Column(Float, default=0)

    # Pagamento
    payment_method_id = Column(String(36), ForeignKey("payment_methods.id", ondelete="SET NULL"))
    installments = Column(Integer)

    # Status
    status = Column(String(20), default=QuoteStatus.PENDING.value, index=True)
    is_sale = Column(Boolean, default=False, index=True)

    # Datas / agenda
    quote_date = Column(Date, nullable=False)
    valid_until = Column(Date)
    service_date = Column(Date, index=True)
    service_time = Column(String(5))
    closed_at = Column(DateTime)

    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "client_id": self.client_id,
            "vehicle_id": self.vehicle_id,
            "client_name": self.client_name,
            "vehicle": self.vehicle,
            "client_document": self.client_document,
            "client_phone": self.client_phone,
            "client_email": self.client_email,
            "client_address": self.client_address,
            "client_address_number": self.client_address_number,
            "client_complement": self.client_complement,
            "client_city": self.client_city,
            "client_state": self.client_state,
            "client_zip_code": self.client_zip_code,
            "services_summary": self.services_summary or [],
            "subtotal": self.subtotal,
            "discount_value": self.discount_value,
            "discount_type": self.discount_type,
            "commission_value": self.commission_value,
            "commission_type": self.commission_type,
            "other_costs_global": self.other_costs_global,
            "total_price": self.total_price,
            "payment_fee": self.payment_fee,
            "total_cost": self.total_cost,
            "net_profit": self.net_profit,
            "payment_method_id": self.payment_method_id,
            "installments": self.installments,
            "status": self.status,
            "is_sale": self.is_sale,
            "quote_date": self.quote_date.isoformat() if self.quote_date else None,
            "valid_until": self.valid_until.isoformat() if self.valid_until else None,
            "service_date": self.service_date.isoformat() if self.service_date else None,
            "service_time": self.service_time,
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
