"""
Precifix Server - Tool Schemas
Calculadoras avulsas (diluicao e custo de produto)
"""
from pydantic import BaseModel, Field
from typing import Optional

from precifix.core.pricing import ProductType
from precifix.schemas.inputs import DilutionInput


class DilutionMixRequest(BaseModel):
    product_part: float = Field(1, gt=0)
    water_part: float = Field(..., ge=0)
    container_size_ml: float = Field(..., gt=0)


class DilutionMixResponse(BaseModel):
    product_ml: float
    water_ml: float
    container_size_ml: float
    ratio_label: str


class ProductCostRequest(BaseModel):
    product_id: Optional[str] = None  # Usa preco/tamanho do catalogo
    price: Optional[float] = Field(None, ge=0)
    size: Optional[float] = Field(None, gt=0)  # litros
    type: ProductType = ProductType.READY_TO_USE
    dilution: Optional[DilutionInput] = None
    usage_ml: float = Field(..., gt=0)
    container_size_ml: Optional[float] = Field(None, ge=0)


class ProductCostResponse(BaseModel):
    cost: float
    cost_per_liter: float
    cost_per_container: float
    dilution_ratio: float
