"""
Precifix Server - Lookup Schemas
Consultas externas (CEP e tabela FIPE)
"""
from pydantic import BaseModel
from typing import Optional


class AddressLookupResponse(BaseModel):
    found: bool
    cep: str
    address: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    message: Optional[str] = None


class FipeItem(BaseModel):
    code: str
    name: str


class FipeVehicleResponse(BaseModel):
    brand: str
    model: str
    year: int
    fuel: str
    fipe_code: str
    price: str
    reference_month: str
