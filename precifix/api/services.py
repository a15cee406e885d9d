"""
Precifix Server - Services API
Servicos oferecidos, produtos vinculados e ranking de popularidade
"""
from collections import Counter
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from precifix.database import get_db
from precifix.models import Service, ServiceProductLink, Product, Quote, User
from precifix.schemas import (
    ServiceCreate,
    ServiceUpdate,
    ServiceResponse,
    ServiceProductIn,
    ServiceRankingItem
)
from precifix.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["Services"])


async def _get_service(db: AsyncSession, user: User, service_id: str, reload: bool = False) -> Service:
    query = select(Service).where(Service.id == service_id, Service.user_id == user.id)
    if reload:
        query = query.execution_options(populate_existing=True)

    result = await db.execute(query)
    service = result.scalar_one_or_none()

    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return service


async def _build_links(db: AsyncSession, user: User, items: List[ServiceProductIn]) -> List[ServiceProductLink]:
    """Valida que os produtos sao do usuario e monta os vinculos"""
    if not items:
        return []

    product_ids = {item.product_id for item in items}
    result = await db.execute(
        select(Product).where(Product.id.in_(product_ids), Product.user_id == user.id)
    )
    products = {p.id: p for p in result.scalars().all()}

    missing = product_ids - set(products)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product not found: {', '.join(sorted(missing))}"
        )

    return [
        ServiceProductLink(
            product_id=item.product_id,
            product=products[item.product_id],
            usage_per_vehicle=item.usage_per_vehicle,
            dilution_ratio=item.dilution_ratio,
            container_size=item.container_size
        )
        for item in items
    ]


@router.get("", response_model=List[ServiceResponse])
async def list_services(
    search: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Lista servicos com rentabilidade calculada"""
    query = select(Service).where(Service.user_id == user.id)

    if search:
        query = query.where(Service.name.ilike(f"%{search}%"))
    if is_active is not None:
        query = query.where(Service.is_active == is_active)

    result = await db.execute(query.order_by(Service.name))
    return [s.to_dict() for s in result.scalars().all()]


@router.get("/ranking", response_model=List[ServiceRankingItem])
async def services_ranking(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Servicos mais usados em orcamentos (mais populares primeiro)"""
    result = await db.execute(
        select(Quote.services_summary).where(Quote.user_id == user.id)
    )

    counter = Counter()
    for summary in result.scalars().all():
        # Conta uma vez por orcamento
        ids = {item.get("service_id") for item in summary or [] if item.get("service_id")}
        counter.update(ids)

    services_result = await db.execute(
        select(Service).where(Service.user_id == user.id)
    )
    services = services_result.scalars().all()

    ranking = sorted(
        services,
        key=lambda s: (-counter.get(s.id, 0), (s.name or "").lower())
    )
    return [
        {"service_id": s.id, "name": s.name, "quote_count": counter.get(s.id, 0)}
        for s in ranking[:limit]
    ]


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    service = await _get_service(db, user, service_id)
    return service.to_dict()


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    request: ServiceCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Cadastra servico (tempo aceita minutos ou "HH:MM")"""
    links = await _build_links(db, user, request.products)

    data = request.model_dump(exclude={"products", "execution_time"})
    data["execution_time_minutes"] = request.execution_time_minutes or 0

    service = Service(user_id=user.id, **data)
    service.product_links = links
    db.add(service)
    await db.commit()

    service = await _get_service(db, user, service.id, reload=True)
    return service.to_dict()


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: str,
    request: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Atualiza servico; `products` informado substitui os vinculos"""
    service = await _get_service(db, user, service_id)

    update_data = request.model_dump(exclude_unset=True, exclude={"products", "execution_time"})
    update_data.pop("execution_time_minutes", None)
    for field, value in update_data.items():
        setattr(service, field, value)

    if request.execution_time_minutes is not None:
        service.execution_time_minutes = request.execution_time_minutes

    if request.products is not None:
        service.product_links = await _build_links(db, user, request.products)

    await db.commit()

    service = await _get_service(db, user, service_id, reload=True)
    return service.to_dict()


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Remove servico; orcamentos guardam a copia do servico"""
    service = await _get_service(db, user, service_id)
    await db.delete(service)
    await db.commit()

    logger.info(f"Servico removido: {service_id}")
