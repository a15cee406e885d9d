"""
Precifix Server - Client Model
Clientes finais e seus veiculos
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from precifix.database import Base


class Client(Base):
    """Modelo de Cliente"""
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Dados pessoais
    name = Column(String(255), nullable=False, index=True)
    document = Column(String(20), index=True)
    phone = Column(String(20))
    email = Column(String(255))

    # Endereço
    zip_code = Column(String(10))
    address = Column(String(255))
    number = Column(String(20))
    complement = Column(String(100))
    neighborhood = Column(String(100))
    city = Column(String(100))
    state = Column(String(2))

    notes = Column(Text)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relacionamentos
    vehicles = relationship(
        "Vehicle",
        back_populates="client",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Vehicle.created_at"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "document": self.document,
            "phone": self.phone,
            "email": self.email,
            "zip_code": self.zip_code,
            "address": self.address,
            "number": self.number,
            "complement": self.complement,
            "neighborhood": self.neighborhood,
            "city": self.city,
            "state": self.state,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "vehicles": [v.to_dict() for v in self.vehicles or []]
        }


class Vehicle(Base):
    """Veiculo de um cliente"""
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    client = relationship("Client", back_populates="vehicles")

    brand = Column(String(100))
    model = Column(String(100))
    plate = Column(String(10), index=True)
    year = Column(String(10))
    color = Column(String(50))
    type = Column(String(20))  # carros, motos, caminhoes
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def description(self) -> str:
        """Texto usado no orcamento: "Marca Modelo (PLACA)" """
        name = " ".join(part for part in (self.brand, self.model) if part)
        if self.plate:
            return f"{name} ({self.plate})" if name else self.plate
        return name

    def to_dict(self):
        return {
            "id": self.id,
            "client_id": self.client_id,
            "brand": self.brand,
            "model": self.model,
            "plate": self.plate,
            "year": self.year,
            "color": self.color,
            "type": self.type,
            "notes": self.notes,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
