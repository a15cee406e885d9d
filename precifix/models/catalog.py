"""
Precifix Server - Catalog Models
Produtos (quimicos) e servicos oferecidos
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text, Float, Integer, ForeignKey
from sqlalchemy.orm import relationship

from precifix.database import Base
from precifix.core.pricing import (
    ProductForCalculation,
    ProductType,
    ServiceForCalculation,
    calculate_product_cost,
    calculate_product_cost_per_container,
    calculate_product_cost_per_liter,
    calculate_service_profitability,
    format_dilution_ratio,
    format_minutes_to_hhmm,
)


class Product(Base):
    """Produto do catalogo"""
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False, index=True)
    size = Column(Float, default=0)  # Embalagem em litros
    price = Column(Float, default=0)  # Preco da embalagem
    type = Column(String(20), default=ProductType.DILUTED.value)
    dilution_ratio = Column(Float, default=0)  # X de 1:X
    container_size_ml = Column(Float, default=0)  # Borrifador/recipiente
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def for_calculation(self, usage_per_vehicle: float = 0.0) -> ProductForCalculation:
        return ProductForCalculation.from_catalog(
            price=self.price,
            size_liters=self.size,
            dilution_ratio=self.dilution_ratio,
            usage_per_vehicle=usage_per_vehicle,
            type=self.type,
            container_size=self.container_size_ml,
        )

    def to_dict(self):
        calc = self.for_calculation()
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "price": self.price,
            "type": self.type,
            "dilution_ratio": self.dilution_ratio,
            "dilution_label": format_dilution_ratio(self.dilution_ratio),
            "container_size_ml": self.container_size_ml,
            "notes": self.notes,
            "cost_per_liter": round(calculate_product_cost_per_liter(calc), 4),
            "cost_per_container": round(calculate_product_cost_per_container(calc), 4),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Service(Base):
    """Servico oferecido (lavagem, polimento, vitrificacao...)"""
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    price = Column(Float, default=0)
    labor_cost_per_hour = Column(Float, default=0)
    execution_time_minutes = Column(Integer, default=0)
    other_costs = Column(Float, default=0)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    product_links = relationship(
        "ServiceProductLink",
        back_populates="service",
        lazy="selectin",
        cascade="all, delete-orphan"
    )

    def for_calculation(self) -> ServiceForCalculation:
        return ServiceForCalculation(
            price=self.price or 0.0,
            labor_cost_per_hour=self.labor_cost_per_hour or 0.0,
            execution_time_minutes=self.execution_time_minutes or 0,
            other_costs=self.other_costs or 0.0,
            products=[link.for_calculation() for link in self.product_links or []],
        )

    def to_dict(self):
        profitability = calculate_service_profitability(self.for_calculation())
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "labor_cost_per_hour": self.labor_cost_per_hour,
            "execution_time_minutes": self.execution_time_minutes,
            "execution_time": format_minutes_to_hhmm(self.execution_time_minutes),
            "other_costs": self.other_costs,
            "is_active": self.is_active,
            "products": [link.to_dict() for link in self.product_links or []],
            "profitability": {
                "products_cost": round(profitability.products_cost, 2),
                "labor_cost": round(profitability.labor_cost, 2),
                "other_costs": round(profitability.other_costs, 2),
                "total_cost": round(profitability.total_cost, 2),
                "profit": round(profitability.profit, 2),
                "margin_pct": round(profitability.margin_pct, 2),
            },
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ServiceProductLink(Base):
    """Produto usado em um servico, com uso/diluicao proprios"""
    __tablename__ = "service_product_links"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    service_id = Column(String(36), ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    service = relationship("Service", back_populates="product_links")

    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    product = relationship("Product", lazy="selectin")

    usage_per_vehicle = Column(Float, default=0)  # ml por aplicacao
    dilution_ratio = Column(Float)  # None = usa a do produto
    container_size = Column(Float)  # None = usa a do produto

    @property
    def effective_dilution_ratio(self) -> float:
        return self.dilution_ratio or (self.product.dilution_ratio if self.product else 0) or 0

    @property
    def effective_container_size(self) -> float:
        return self.container_size or (self.product.container_size_ml if self.product else 0) or 0

    def for_calculation(self) -> ProductForCalculation:
        return ProductForCalculation.from_catalog(
            price=self.product.price,
            size_liters=self.product.size,
            dilution_ratio=self.effective_dilution_ratio,
            usage_per_vehicle=self.usage_per_vehicle,
            type=self.product.type,
            container_size=self.effective_container_size,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "name": self.product.name if self.product else None,
            "size": self.product.size if self.product else None,
            "price": self.product.price if self.product else None,
            "type": self.product.type if self.product else None,
            "usage_per_vehicle": self.usage_per_vehicle,
            "dilution_ratio": self.effective_dilution_ratio,
            "container_size": self.effective_container_size,
            "cost": round(calculate_product_cost(self.for_calculation()), 4) if self.product else 0.0,
        }
