"""
Precifix Server - Catalog Schemas
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional, Union
from datetime import datetime

from precifix.core.pricing import ProductType
from precifix.schemas.inputs import dilution_text_to_ratio, duration_text_to_minutes


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    size: float = Field(..., gt=0)  # litros
    price: float = Field(..., ge=0)
    type: ProductType = ProductType.DILUTED
    dilution_ratio: Optional[Union[str, float]] = None  # "1:100" ou 100
    container_size_ml: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("dilution_ratio")
    @classmethod
    def parse_dilution(cls, v):
        if v is None or v == "":
            return None
        return dilution_text_to_ratio(v)

    @model_validator(mode="after")
    def diluted_requires_ratio(self):
        if self.type == ProductType.DILUTED and not self.dilution_ratio:
            raise ValueError("diluted products require a dilution ratio (1:X)")
        return self


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    size: Optional[float] = Field(None, gt=0)
    price: Optional[float] = Field(None, ge=0)
    type: Optional[ProductType] = None
    dilution_ratio: Optional[Union[str, float]] = None
    container_size_ml: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("dilution_ratio")
    @classmethod
    def parse_dilution(cls, v):
        if v is None or v == "":
            return None
        return dilution_text_to_ratio(v)


class ProductResponse(BaseModel):
    id: str
    name: str
    size: Optional[float] = None
    price: Optional[float] = None
    type: str
    dilution_ratio: Optional[float] = None
    dilution_label: str = "N/A"
    container_size_ml: Optional[float] = None
    notes: Optional[str] = None
    cost_per_liter: float = 0.0
    cost_per_container: float = 0.0
    created_at: Optional[datetime] = None


class ServiceProductIn(BaseModel):
    product_id: str
    usage_per_vehicle: float = Field(..., gt=0)  # ml
    dilution_ratio: Optional[Union[str, float]] = None
    container_size: Optional[float] = Field(None, ge=0)

    @field_validator("dilution_ratio")
    @classmethod
    def parse_dilution(cls, v):
        if v is None or v == "":
            return None
        return dilution_text_to_ratio(v)


class _ServiceTimeMixin(BaseModel):
    execution_time_minutes: Optional[int] = Field(None, ge=0)
    execution_time: Optional[str] = None  # "HH:MM"

    @model_validator(mode="after")
    def resolve_execution_time(self):
        if self.execution_time:
            self.execution_time_minutes = duration_text_to_minutes(self.execution_time)
        return self


class ServiceCreate(_ServiceTimeMixin):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    labor_cost_per_hour: float = Field(0, ge=0)
    other_costs: float = Field(0, ge=0)
    is_active: bool = True
    products: List[ServiceProductIn] = []


class ServiceUpdate(_ServiceTimeMixin):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    labor_cost_per_hour: Optional[float] = Field(None, ge=0)
    other_costs: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    products: Optional[List[ServiceProductIn]] = None


class ServiceResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float = 0
    labor_cost_per_hour: float = 0
    execution_time_minutes: int = 0
    execution_time: str = "00:00"
    other_costs: float = 0
    is_active: bool = True
    products: List[dict] = []
    profitability: dict = {}
    created_at: Optional[datetime] = None


class ServiceRankingItem(BaseModel):
    service_id: str
    name: str
    quote_count: int
