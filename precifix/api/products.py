"""
Precifix Server - Products API
Catalogo de produtos (quimicos) usados nos servicos
"""
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from precifix.database import get_db
from precifix.models import Product, ServiceProductLink, User
from precifix.schemas import ProductCreate, ProductUpdate, ProductResponse
from precifix.core.pricing import ProductType
from precifix.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


async def _get_product(db: AsyncSession, user: User, product_id: str) -> Product:
    result = await db.execute(
        select(Product).where(Product.id == product_id, Product.user_id == user.id)
    )
    product = result.scalar_one_or_none()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    return product


@router.get("", response_model=List[ProductResponse])
async def list_products(
    search: Optional[str] = Query(None),
    type: Optional[ProductType] = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Lista produtos do catalogo"""
    query = select(Product).where(Product.user_id == user.id)

    if search:
        query = query.where(Product.name.ilike(f"%{search}%"))
    if type:
        query = query.where(Product.type == type.value)

    result = await db.execute(query.order_by(Product.name))
    return [p.to_dict() for p in result.scalars().all()]


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    product = await _get_product(db, user, product_id)
    return product.to_dict()


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Cadastra produto (diluicao aceita "1:X")"""
    data = request.model_dump()
    data["type"] = request.type.value
    data["dilution_ratio"] = request.dilution_ratio or 0
    data["container_size_ml"] = request.container_size_ml or 0

    product = Product(user_id=user.id, **data)
    db.add(product)
    await db.commit()

    return product.to_dict()


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    request: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Atualiza produto"""
    product = await _get_product(db, user, product_id)

    update_data = request.model_dump(exclude_unset=True)
    if "type" in update_data and update_data["type"] is not None:
        update_data["type"] = update_data["type"].value
    for field, value in update_data.items():
        setattr(product, field, value)

    if product.type == ProductType.DILUTED.value and not product.dilution_ratio:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Diluted products require a dilution ratio (1:X)"
        )

    await db.commit()
    return product.to_dict()


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Remove produto e os vinculos com servicos"""
    product = await _get_product(db, user, product_id)

    await db.execute(
        delete(ServiceProductLink).where(ServiceProductLink.product_id == product.id)
    )
    await db.delete(product)
    await db.commit()

    logger.info(f"Produto removido: {product_id}")
