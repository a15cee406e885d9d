"""
Servico de Custos Operacionais

Le custos mensais e horario de funcionamento do usuario e entrega o
custo por hora e o metodo de custo de produtos usado nos orcamentos.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from precifix.models import OperationalCost, OperationalHours
from precifix.core.pricing import (
    HourlyCostBreakdown,
    MONTHLY_PRODUCTS_COST_DESCRIPTION,
    ProductCostMethod,
    calculate_hourly_cost_breakdown,
)

logger = logging.getLogger(__name__)


async def list_operational_costs(db: AsyncSession, user_id: str) -> List[OperationalCost]:
    result = await db.execute(
        select(OperationalCost)
        .where(OperationalCost.user_id == user_id)
        .order_by(OperationalCost.created_at)
    )
    return list(result.scalars().all())


async def get_operational_hours(db: AsyncSession, user_id: str) -> Optional[OperationalHours]:
    result = await db.execute(
        select(OperationalHours).where(OperationalHours.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_hourly_cost_breakdown(db: AsyncSession, user_id: str) -> HourlyCostBreakdown:
    """Custo por hora com os dados atuais do usuario"""
    costs = await list_operational_costs(db, user_id)
    hours = await get_operational_hours(db, user_id)

    breakdown = calculate_hourly_cost_breakdown(
        [c.for_calculation() for c in costs],
        hours.for_calculation() if hours else {}
    )
    if breakdown.hourly_cost <= 0:
        logger.debug(f"Custo por hora indisponivel para usuario {user_id}")
    return breakdown


async def get_product_cost_method(db: AsyncSession, user_id: str) -> ProductCostMethod:
    """
    monthly-average quando existe o custo "Produtos Gastos no Mês":
    nesse caso os produtos ja estao no custo mensal e nao entram
    de novo no orcamento.
    """
    result = await db.execute(
        select(func.count(OperationalCost.id)).where(
            OperationalCost.user_id == user_id,
            OperationalCost.description == MONTHLY_PRODUCTS_COST_DESCRIPTION
        )
    )
    if result.scalar_one() > 0:
        return ProductCostMethod.MONTHLY_AVERAGE
    return ProductCostMethod.PER_SERVICE
