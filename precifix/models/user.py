"""
Precifix Server - User Model
Dono da conta (empresa de estetica automotiva). Todo dado pertence a um usuario.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime

from precifix.database import Base


class User(Base):
    """Modelo de usuario"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255))

    # Dados da empresa (saem no documento do orcamento)
    company_name = Column(String(255))
    document = Column(String(20))
    phone = Column(String(20))
    address = Column(String(255))
    address_number = Column(String(20))
    city = Column(String(100))
    state = Column(String(2))
    zip_code = Column(String(10))

    is_active = Column(Boolean, default=True)

    last_login_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "company_name": self.company_name,
            "document": self.document,
            "phone": self.phone,
            "address": self.address,
            "address_number": self.address_number,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "is_active": self.is_active,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
