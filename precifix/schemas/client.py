"""
Precifix Server - Client Schemas
"""
from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime


class VehicleIn(BaseModel):
    id: Optional[str] = None  # Informado = atualiza; ausente = novo
    brand: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    plate: Optional[str] = Field(None, max_length=10)
    year: Optional[str] = Field(None, max_length=10)
    color: Optional[str] = Field(None, max_length=50)
    type: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None


class VehicleResponse(BaseModel):
    id: str
    client_id: str
    brand: Optional[str] = None
    model: Optional[str] = None
    plate: Optional[str] = None
    year: Optional[str] = None
    color: Optional[str] = None
    type: Optional[str] = None
    notes: Optional[str] = None
    description: str = ""

    class Config:
        from_attributes = True


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    document: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    zip_code: Optional[str] = Field(None, max_length=10)
    address: Optional[str] = Field(None, max_length=255)
    number: Optional[str] = Field(None, max_length=20)
    complement: Optional[str] = Field(None, max_length=100)
    neighborhood: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=2)
    notes: Optional[str] = None
    vehicles: List[VehicleIn] = []


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    document: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    zip_code: Optional[str] = Field(None, max_length=10)
    address: Optional[str] = Field(None, max_length=255)
    number: Optional[str] = Field(None, max_length=20)
    complement: Optional[str] = Field(None, max_length=100)
    neighborhood: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=2)
    notes: Optional[str] = None
    # None = nao mexe nos veiculos; lista = estado final dos veiculos
    vehicles: Optional[List[VehicleIn]] = None


class ClientResponse(BaseModel):
    id: str
    name: str
    document: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    zip_code: Optional[str] = None
    address: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    vehicles: List[VehicleResponse] = []

    class Config:
        from_attributes = True
