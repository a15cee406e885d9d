"""
Precifix Server - Payment Method Schemas
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from precifix.core.pricing import PaymentMethodType


class InstallmentRate(BaseModel):
    installments: int = Field(..., ge=1, le=12)
    rate: float = Field(0, ge=0, le=100)


class PaymentMethodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: PaymentMethodType
    rate: float = Field(0, ge=0, le=100)
    is_active: bool = True
    installments: List[InstallmentRate] = []


class PaymentMethodUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    rate: Optional[float] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None
    installments: Optional[List[InstallmentRate]] = None


class PaymentMethodResponse(BaseModel):
    id: str
    name: str
    type: str
    rate: float = 0
    is_active: bool = True
    installments: List[InstallmentRate] = []
    created_at: Optional[datetime] = None
