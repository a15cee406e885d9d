"""
Precifix Server - Tools API
Calculadora de diluicao e de custo de produto
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from precifix.database import get_db
from precifix.models import Product, User
from precifix.schemas import DilutionMixRequest, DilutionMixResponse, ProductCostRequest, ProductCostResponse
from precifix.core.pricing import (
    ProductForCalculation,
    ProductType,
    calculate_dilution_mix,
    calculate_product_cost,
    calculate_product_cost_per_container,
    calculate_product_cost_per_liter,
)
from precifix.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.post("/dilution", response_model=DilutionMixResponse)
async def dilution_mix(request: DilutionMixRequest, user: User = Depends(get_current_user)):
    """Quantidade de produto e agua para encher um recipiente"""
    mix = calculate_dilution_mix(request.product_part, request.water_part, request.container_size_ml)
    return DilutionMixResponse(
        product_ml=round(mix.product_ml, 2),
        water_ml=round(mix.water_ml, 2),
        container_size_ml=mix.container_size_ml,
        ratio_label=f"{request.product_part:g}:{request.water_part:g}"
    )


@router.post("/product-cost", response_model=ProductCostResponse)
async def product_cost(
    request: ProductCostRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Custo por aplicacao de um produto do catalogo ou avulso"""
    product = None
    if request.product_id:
        result = await db.execute(
            select(Product).where(Product.id == request.product_id, Product.user_id == user.id)
        )
        product = result.scalar_one_or_none()
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found"
            )

    price = request.price if request.price is not None else (product.price if product else None)
    size = request.size if request.size is not None else (product.size if product else None)
    if price is None or not size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Price and size are required when no product is given"
        )

    product_type = ProductType(product.type) if product and "type" not in request.model_fields_set else request.type
    if request.dilution is not None:
        ratio = request.dilution.ratio()
    else:
        ratio = product.dilution_ratio if product else 0.0
    if product_type == ProductType.DILUTED and not ratio:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Diluted products require a dilution ratio (1:X)"
        )

    container = request.container_size_ml
    if container is None:
        container = product.container_size_ml if product else 0.0

    calc = ProductForCalculation.from_catalog(
        price=price,
        size_liters=size,
        dilution_ratio=ratio,
        usage_per_vehicle=request.usage_ml,
        type=product_type.value,
        container_size=container,
    )
    return ProductCostResponse(
        cost=round(calculate_product_cost(calc), 4),
        cost_per_liter=round(calculate_product_cost_per_liter(calc), 4),
        cost_per_container=round(calculate_product_cost_per_container(calc), 4),
        dilution_ratio=ratio or 0.0
    )
