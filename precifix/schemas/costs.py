"""
Precifix Server - Operational Cost Schemas
"""
import re
from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import datetime

from precifix.core.pricing import ProductCostMethod

_CLOCK = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")


class OperationalCostCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    value: float = Field(..., ge=0)
    type: Literal["fixed", "variable"] = "fixed"
    category: Optional[str] = Field(None, max_length=100)


class OperationalCostUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    value: Optional[float] = Field(None, ge=0)
    type: Optional[Literal["fixed", "variable"]] = None
    category: Optional[str] = Field(None, max_length=100)


class OperationalCostResponse(BaseModel):
    id: str
    description: str
    value: float
    type: str
    category: Optional[str] = None
    created_at: Optional[datetime] = None


class OperationalHoursPayload(BaseModel):
    """Horario por dia; string vazia = fechado"""
    monday_start: str = ""
    monday_end: str = ""
    tuesday_start: str = ""
    tuesday_end: str = ""
    wednesday_start: str = ""
    wednesday_end: str = ""
    thursday_start: str = ""
    thursday_end: str = ""
    friday_start: str = ""
    friday_end: str = ""
    saturday_start: str = ""
    saturday_end: str = ""
    sunday_start: str = ""
    sunday_end: str = ""

    @field_validator("*")
    @classmethod
    def valid_clock(cls, v):
        v = (v or "").strip()
        if v and not _CLOCK.match(v):
            raise ValueError("time must be HH:MM")
        return v


class HourlyCostResponse(BaseModel):
    available: bool
    hourly_cost: float
    total_monthly_expenses: float
    working_days_in_month: int
    average_daily_hours: float
    daily_cost: float


class CostSummaryResponse(BaseModel):
    fixed_costs: float
    variable_costs: float
    total_monthly_expenses: float
    hourly_cost: float
    product_cost_method: ProductCostMethod
