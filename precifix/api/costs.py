"""
Precifix Server - Operational Costs API
Custos mensais, horario de funcionamento e custo por hora
"""
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from precifix.database import get_db
from precifix.models import OperationalCost, OperationalHours, User
from precifix.schemas import (
    OperationalCostCreate,
    OperationalCostUpdate,
    OperationalCostResponse,
    OperationalHoursPayload,
    HourlyCostResponse,
    CostSummaryResponse
)
from precifix.services.cost_service import (
    get_hourly_cost_breakdown,
    get_operational_hours,
    get_product_cost_method,
    list_operational_costs
)
from precifix.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/costs", tags=["Operational Costs"])


async def _get_cost(db: AsyncSession, user: User, cost_id: str) -> OperationalCost:
    result = await db.execute(
        select(OperationalCost).where(OperationalCost.id == cost_id, OperationalCost.user_id == user.id)
    )
    cost = result.scalar_one_or_none()

    if not cost:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Operational cost not found"
        )
    return cost


@router.get("", response_model=List[OperationalCostResponse])
async def list_costs(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    costs = await list_operational_costs(db, user.id)
    return [c.to_dict() for c in costs]


@router.post("", response_model=OperationalCostResponse, status_code=status.HTTP_201_CREATED)
async def create_cost(
    request: OperationalCostCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    cost = OperationalCost(user_id=user.id, **request.model_dump())
    db.add(cost)
    await db.commit()
    return cost.to_dict()


# Rotas fixas antes de /{cost_id}
@router.get("/hours", response_model=OperationalHoursPayload)
async def get_hours(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Horario de funcionamento (vazio = fechado)"""
    hours = await get_operational_hours(db, user.id)
    if not hours:
        return OperationalHoursPayload()
    return hours.to_dict()


@router.put("/hours", response_model=OperationalHoursPayload)
async def save_hours(
    request: OperationalHoursPayload,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Grava o horario da semana (um registro por usuario)"""
    hours = await get_operational_hours(db, user.id)
    if not hours:
        hours = OperationalHours(user_id=user.id)
        db.add(hours)

    for field, value in request.model_dump().items():
        setattr(hours, field, value or None)

    await db.commit()
    return hours.to_dict()


@router.get("/hourly-cost", response_model=HourlyCostResponse)
async def get_hourly_cost(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Custo por hora; available=false quando nao ha dados suficientes"""
    breakdown = await get_hourly_cost_breakdown(db, user.id)
    return HourlyCostResponse(
        available=breakdown.hourly_cost > 0,
        hourly_cost=round(breakdown.hourly_cost, 2),
        total_monthly_expenses=round(breakdown.total_monthly_expenses, 2),
        working_days_in_month=breakdown.working_days_in_month,
        average_daily_hours=round(breakdown.average_daily_hours, 2),
        daily_cost=round(breakdown.daily_cost, 2)
    )


@router.get("/summary", response_model=CostSummaryResponse)
async def get_summary(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    breakdown = await get_hourly_cost_breakdown(db, user.id)
    return CostSummaryResponse(
        fixed_costs=round(breakdown.fixed_costs, 2),
        variable_costs=round(breakdown.variable_costs, 2),
        total_monthly_expenses=round(breakdown.total_monthly_expenses, 2),
        hourly_cost=round(breakdown.hourly_cost, 2),
        product_cost_method=await get_product_cost_method(db, user.id)
    )


@router.get("/{cost_id}", response_model=OperationalCostResponse)
async def get_cost(
    cost_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    cost = await _get_cost(db, user, cost_id)
    return cost.to_dict()


@router.put("/{cost_id}", response_model=OperationalCostResponse)
async def update_cost(
    cost_id: str,
    request: OperationalCostUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    cost = await _get_cost(db, user, cost_id)

    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(cost, field, value)

    await db.commit()
    return cost.to_dict()


@router.delete("/{cost_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cost(
    cost_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    cost = await _get_cost(db, user, cost_id)
    await db.delete(cost)
    await db.commit()
