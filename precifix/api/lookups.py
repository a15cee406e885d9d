"""
Precifix Server - Lookups API
CEP (ViaCEP) e tabela FIPE
"""
from typing import List, Literal
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from precifix.models import User
from precifix.schemas import AddressLookupResponse, FipeItem, FipeVehicleResponse
from precifix.services import lookup_service
from precifix.services.lookup_service import UpstreamLookupError
from precifix.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lookups", tags=["Lookups"])

VehicleType = Literal["carros", "motos", "caminhoes"]


def _upstream_error(what: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"FIPE lookup failed: could not load {what}"
    )


@router.get("/cep/{cep}", response_model=AddressLookupResponse)
async def lookup_cep(cep: str, user: User = Depends(get_current_user)):
    """Endereco pelo CEP (found=false quando nao encontrado/indisponivel)"""
    return await lookup_service.lookup_cep(cep)


@router.get("/fipe/{vehicle_type}/brands", response_model=List[FipeItem])
async def fipe_brands(vehicle_type: VehicleType, user: User = Depends(get_current_user)):
    try:
        return await lookup_service.fipe_brands(vehicle_type)
    except UpstreamLookupError:
        raise _upstream_error("brands")


@router.get("/fipe/{vehicle_type}/brands/{brand_code}/models", response_model=List[FipeItem])
async def fipe_models(vehicle_type: VehicleType, brand_code: str, user: User = Depends(get_current_user)):
    try:
        return await lookup_service.fipe_models(vehicle_type, brand_code)
    except UpstreamLookupError:
        raise _upstream_error("models")


@router.get("/fipe/{vehicle_type}/brands/{brand_code}/models/{model_code}/years", response_model=List[FipeItem])
async def fipe_years(
    vehicle_type: VehicleType,
    brand_code: str,
    model_code: str,
    user: User = Depends(get_current_user)
):
    try:
        return await lookup_service.fipe_years(vehicle_type, brand_code, model_code)
    except UpstreamLookupError:
        raise _upstream_error("years")


@router.get(
    "/fipe/{vehicle_type}/brands/{brand_code}/models/{model_code}/years/{year_code}",
    response_model=FipeVehicleResponse
)
async def fipe_vehicle(
    vehicle_type: VehicleType,
    brand_code: str,
    model_code: str,
    year_code: str,
    user: User = Depends(get_current_user)
):
    try:
        return await lookup_service.fipe_vehicle(vehicle_type, brand_code, model_code, year_code)
    except UpstreamLookupError:
        raise _upstream_error("vehicle details")
