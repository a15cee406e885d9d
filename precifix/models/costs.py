"""
Precifix Server - Operational Cost Models
Custos mensais e horario de funcionamento (base do custo por hora)
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, ForeignKey

from precifix.database import Base
from precifix.core.pricing import OperationalCostEntry, OperationalHoursDay, WEEKDAYS


class OperationalCost(Base):
    """Custo operacional mensal (fixo ou variavel)"""
    __tablename__ = "operational_costs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    description = Column(String(255), nullable=False)
    value = Column(Float, nullable=False, default=0)
    type = Column(String(10), nullable=False, default="fixed")  # fixed, variable
    category = Column(String(100))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def for_calculation(self) -> OperationalCostEntry:
        return OperationalCostEntry(value=self.value or 0.0, type=self.type)

    def to_dict(self):
        return {
            "id": self.id,
            "description": self.description,
            "value": self.value,
            "type": self.type,
            "category": self.category,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class OperationalHours(Base):
    """Horario de funcionamento semanal (um registro por usuario)"""
    __tablename__ = "operational_hours"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True)

    monday_start = Column(String(8))
    monday_end = Column(String(8))
    tuesday_start = Column(String(8))
    tuesday_end = Column(String(8))
    wednesday_start = Column(String(8))
    wednesday_end = Column(String(8))
    thursday_start = Column(String(8))
    thursday_end = Column(String(8))
    friday_start = Column(String(8))
    friday_end = Column(String(8))
    saturday_start = Column(String(8))
    saturday_end = Column(String(8))
    sunday_start = Column(String(8))
    sunday_end = Column(String(8))

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def for_calculation(self) -> dict:
        return {
            day: OperationalHoursDay(
                start=getattr(self, f"{day}_start"),
                end=getattr(self, f"{day}_end")
            )
            for day in WEEKDAYS
        }

    def to_dict(self):
        data = {}
        for day in WEEKDAYS:
            data[f"{day}_start"] = getattr(self, f"{day}_start") or ""
            data[f"{day}_end"] = getattr(self, f"{day}_end") or ""
        return data
