"""
Precifix Server - Quote Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Union
from datetime import date, datetime

from precifix.core.pricing import ProductCostMethod, ProductType
from precifix.models.quote import QuoteStatus
from precifix.schemas.inputs import AdjustmentInput, dilution_text_to_ratio


class QuotedProductIn(BaseModel):
    """Produto usado no servico deste orcamento (copia editavel)"""
    product_id: Optional[str] = None
    name: str
    size: float = Field(..., ge=0)  # litros
    price: float = Field(..., ge=0)
    type: ProductType = ProductType.DILUTED
    usage_per_vehicle: float = Field(0, ge=0)
    dilution_ratio: Optional[Union[str, float]] = None
    container_size: Optional[float] = Field(None, ge=0)

    @field_validator("dilution_ratio")
    @classmethod
    def parse_dilution(cls, v):
        if v is None or v == "":
            return None
        return dilution_text_to_ratio(v)


class QuotedServiceIn(BaseModel):
    """
    Servico do orcamento. `service_id` aponta para o catalogo; os campos
    `quote_*` sobrescrevem apenas a copia deste orcamento.
    """
    service_id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    labor_cost_per_hour: Optional[float] = Field(None, ge=0)
    execution_time_minutes: Optional[int] = Field(None, ge=0)
    other_costs: Optional[float] = Field(None, ge=0)

    quote_price: Optional[float] = Field(None, ge=0)
    quote_labor_cost_per_hour: Optional[float] = Field(None, ge=0)
    quote_execution_time_minutes: Optional[int] = Field(None, ge=0)
    quote_other_costs: Optional[float] = Field(None, ge=0)
    quote_products: Optional[List[QuotedProductIn]] = None


class QuoteCalculateRequest(BaseModel):
    services: List[QuotedServiceIn] = []
    other_costs_global: float = Field(0, ge=0)
    commission: AdjustmentInput = AdjustmentInput()
    discount: AdjustmentInput = AdjustmentInput()
    payment_method_id: Optional[str] = None
    installments: Optional[int] = Field(None, ge=1, le=12)
    desired_margin_pct: float = Field(40.0, ge=0, lt=100)


class QuoteTotalsResponse(BaseModel):
    total_service_value: float
    total_execution_minutes: float
    total_execution_time: str
    total_products_cost: float
    total_labor_cost: float
    total_other_costs: float
    other_costs_global: float
    calculated_commission: float
    calculated_discount: float
    total_cost: float
    value_after_discount: float
    payment_fee: float
    final_price_with_fee: float
    net_profit: float
    margin_pct: float
    suggested_price: float
    product_cost_method: ProductCostMethod


class QuoteCalculateResponse(BaseModel):
    totals: QuoteTotalsResponse
    services: List[dict]


class QuoteClientDetails(BaseModel):
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=255)
    address_number: Optional[str] = Field(None, max_length=20)
    complement: Optional[str] = Field(None, max_length=100)


class QuoteCreate(QuoteCalculateRequest):
    client_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=255)
    vehicle: Optional[str] = Field(None, max_length=255)
    client_details: QuoteClientDetails = QuoteClientDetails()
    is_sale: bool = False
    is_client_required: bool = True
    status: QuoteStatus = QuoteStatus.PENDING
    quote_date: Optional[date] = None
    service_date: Optional[date] = None
    service_time: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("service_time")
    @classmethod
    def blank_time_is_none(cls, v):
        if v is None or v.strip() == "":
            return None
        v = v.strip()
        parts = v.split(":")
        if len(parts) != 2 or not all(p.isdigit() for p in parts) or int(parts[0]) > 23 or int(parts[1]) > 59:
            raise ValueError("service_time must be HH:MM")
        return f"{int(parts[0]):02d}:{int(parts[1]):02d}"


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus


class CloseSaleRequest(BaseModel):
    account_id: Optional[str] = None  # Lanca a entrada nesta conta
    payment_date: Optional[date] = None


class QuoteResponse(BaseModel):
    id: str
    client_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    client_name: str
    vehicle: Optional[str] = None
    client_document: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    client_address: Optional[str] = None
    client_address_number: Optional[str] = None
    client_complement: Optional[str] = None
    client_city: Optional[str] = None
    client_state: Optional[str] = None
    client_zip_code: Optional[str] = None
    services_summary: List[dict] = []
    subtotal: float = 0
    discount_value: float = 0
    discount_type: Optional[str] = None
    commission_value: float = 0
    commission_type: Optional[str] = None
    other_costs_global: float = 0
    total_price: float = 0
    payment_fee: float = 0
    total_cost: float = 0
    net_profit: float = 0
    payment_method_id: Optional[str] = None
    installments: Optional[int] = None
    status: str
    is_sale: bool = False
    quote_date: Optional[date] = None
    valid_until: Optional[date] = None
    service_date: Optional[date] = None
    service_time: Optional[str] = None
    closed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class AgendaSummary(BaseModel):
    count: int
    total_value: float
    pending: int
    accepted: int
    closed: int


class AgendaResponse(BaseModel):
    date: date
    summary: AgendaSummary
    quotes: List[QuoteResponse]


class SalesSummaryResponse(BaseModel):
    """Resumo do periodo: vendas fechadas, despesas e funil de orcamentos"""
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    revenue: float = 0
    expenses: float = 0
    net_revenue: float = 0
    completed_services: int = 0
    vehicles_serviced: int = 0
    average_ticket: float = 0
    pending_count: int = 0
    pending_value: float = 0
    accepted_count: int = 0
    accepted_value: float = 0
    rejected_count: int = 0
