"""
Servico de Orcamentos

Monta a copia (snapshot) dos servicos do orcamento a partir do catalogo,
aplica os overrides do orcamento somente na copia e calcula os totais
com o modulo de precificacao.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from precifix.models import Client, PaymentMethod, Service, Vehicle, QUICK_SALE_CLIENT_NAME, QUICK_SALE_VEHICLE
from precifix.core.pricing import (
    ProductForCalculation,
    QuoteTotals,
    ServiceForCalculation,
    calculate_product_cost,
    calculate_quote_totals,
    format_minutes_to_hhmm,
    service_labor_cost,
    service_products_cost,
)
from precifix.schemas.quote import QuoteCalculateRequest, QuoteCreate, QuotedServiceIn
from precifix.services.cost_service import get_product_cost_method

logger = logging.getLogger(__name__)


@dataclass
class QuoteCalculation:
    totals: QuoteTotals
    services_summary: List[dict]
    payment_method: Optional[PaymentMethod] = None
    calculations: List[ServiceForCalculation] = field(default_factory=list)


def _pick(override, base, default=0.0):
    """Override do orcamento quando informado, senao o valor base"""
    if override is not None:
        return override
    if base is not None:
        return base
    return default


def _product_snapshot_from_link(link) -> dict:
    product = link.product
    return {
        "product_id": link.product_id,
        "name": product.name,
        "size": product.size or 0.0,
        "price": product.price or 0.0,
        "type": product.type,
        "usage_per_vehicle": link.usage_per_vehicle or 0.0,
        "dilution_ratio": link.effective_dilution_ratio,
        "container_size": link.effective_container_size,
    }


def _product_snapshot_from_input(item) -> dict:
    return {
        "product_id": item.product_id,
        "name": item.name,
        "size": item.size,
        "price": item.price,
        "type": item.type.value,
        "usage_per_vehicle": item.usage_per_vehicle,
        "dilution_ratio": item.dilution_ratio or 0.0,
        "container_size": item.container_size or 0.0,
    }


def _product_for_calculation(snapshot: dict) -> ProductForCalculation:
    return ProductForCalculation.from_catalog(
        price=snapshot["price"],
        size_liters=snapshot["size"],
        dilution_ratio=snapshot["dilution_ratio"],
        usage_per_vehicle=snapshot["usage_per_vehicle"],
        type=snapshot["type"],
        container_size=snapshot["container_size"],
    )


def build_service_snapshot(item: QuotedServiceIn, catalog: Optional[Service]) -> dict:
    """
    Copia do servico para o orcamento. Valores base vem do catalogo
    (ou do proprio item quando nao ha catalogo); campos quote_* ficam
    guardados separados e prevalecem no calculo.
    """
    if catalog is not None:
        base = {
            "name": item.name or catalog.name,
            "price": catalog.price or 0.0,
            "labor_cost_per_hour": catalog.labor_cost_per_hour or 0.0,
            "execution_time_minutes": catalog.execution_time_minutes or 0,
            "other_costs": catalog.other_costs or 0.0,
        }
        catalog_products = [_product_snapshot_from_link(link) for link in catalog.product_links or []]
    else:
        base = {
            "name": item.name or "Serviço",
            "price": item.price or 0.0,
            "labor_cost_per_hour": item.labor_cost_per_hour or 0.0,
            "execution_time_minutes": item.execution_time_minutes or 0,
            "other_costs": item.other_costs or 0.0,
        }
        catalog_products = []

    if item.quote_products is not None:
        products = [_product_snapshot_from_input(p) for p in item.quote_products]
    else:
        products = catalog_products

    snapshot = {
        "service_id": catalog.id if catalog is not None else None,
        **base,
        "quote_price": item.quote_price,
        "quote_labor_cost_per_hour": item.quote_labor_cost_per_hour,
        "quote_execution_time_minutes": item.quote_execution_time_minutes,
        "quote_other_costs": item.quote_other_costs,
        "products": products,
    }

    calc = snapshot_to_calculation(snapshot)
    for product, product_calc in zip(snapshot["products"], calc.products):
        product["cost"] = round(calculate_product_cost(product_calc), 4)

    snapshot["final_price"] = calc.price
    snapshot["final_execution_time"] = format_minutes_to_hhmm(calc.execution_time_minutes)
    snapshot["products_cost"] = round(service_products_cost(calc), 2)
    snapshot["labor_cost"] = round(service_labor_cost(calc), 2)
    return snapshot


def snapshot_to_calculation(snapshot: dict) -> ServiceForCalculation:
    """Valores efetivos de uma copia de servico"""
    return ServiceForCalculation(
        price=_pick(snapshot.get("quote_price"), snapshot.get("price")),
        labor_cost_per_hour=_pick(snapshot.get("quote_labor_cost_per_hour"), snapshot.get("labor_cost_per_hour")),
        execution_time_minutes=_pick(snapshot.get("quote_execution_time_minutes"), snapshot.get("execution_time_minutes"), 0),
        other_costs=_pick(snapshot.get("quote_other_costs"), snapshot.get("other_costs")),
        products=[_product_for_calculation(p) for p in snapshot.get("products") or []],
    )


async def load_catalog_services(db: AsyncSession, user_id: str, items: List[QuotedServiceIn]) -> Dict[str, Service]:
    service_ids = {item.service_id for item in items if item.service_id}
    if not service_ids:
        return {}

    result = await db.execute(
        select(Service).where(Service.id.in_(service_ids), Service.user_id == user_id)
    )
    services = {s.id: s for s in result.scalars().all()}

    missing = service_ids - set(services)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Service not found: {', '.join(sorted(missing))}"
        )
    return services


async def load_payment_method(db: AsyncSession, user_id: str, method_id: Optional[str]) -> Optional[PaymentMethod]:
    if not method_id:
        return None

    result = await db.execute(
        select(PaymentMethod).where(PaymentMethod.id == method_id, PaymentMethod.user_id == user_id)
    )
    method = result.scalar_one_or_none()
    if not method:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment method not found"
        )
    return method


async def calculate_quote(db: AsyncSession, user_id: str, request: QuoteCalculateRequest) -> QuoteCalculation:
    """Snapshot dos servicos + totais do orcamento"""
    catalog = await load_catalog_services(db, user_id, request.services)
    summary = [
        build_service_snapshot(item, catalog.get(item.service_id) if item.service_id else None)
        for item in request.services
    ]
    calculations = [snapshot_to_calculation(s) for s in summary]

    payment_method = await load_payment_method(db, user_id, request.payment_method_id)
    product_cost_method = await get_product_cost_method(db, user_id)

    totals = calculate_quote_totals(
        calculations,
        other_costs_global=request.other_costs_global,
        commission_value=request.commission.amount(),
        commission_type=request.commission.type,
        discount_value=request.discount.amount(),
        discount_type=request.discount.type,
        payment_method=payment_method.for_calculation() if payment_method else None,
        installments=request.installments,
        desired_margin_pct=request.desired_margin_pct,
        product_cost_method=product_cost_method,
    )

    return QuoteCalculation(
        totals=totals,
        services_summary=summary,
        payment_method=payment_method,
        calculations=calculations,
    )


def totals_to_dict(totals: QuoteTotals) -> dict:
    """Totais arredondados para a resposta da API"""
    return {
        "total_service_value": round(totals.total_service_value, 2),
        "total_execution_minutes": totals.total_execution_minutes,
        "total_execution_time": format_minutes_to_hhmm(totals.total_execution_minutes),
        "total_products_cost": round(totals.total_products_cost, 2),
        "total_labor_cost": round(totals.total_labor_cost, 2),
        "total_other_costs": round(totals.total_other_costs, 2),
        "other_costs_global": round(totals.other_costs_global, 2),
        "calculated_commission": round(totals.calculated_commission, 2),
        "calculated_discount": round(totals.calculated_discount, 2),
        "total_cost": round(totals.total_cost, 2),
        "value_after_discount": round(totals.value_after_discount, 2),
        "payment_fee": round(totals.payment_fee, 2),
        "final_price_with_fee": round(totals.final_price_with_fee, 2),
        "net_profit": round(totals.net_profit, 2),
        "margin_pct": round(totals.margin_pct, 2),
        "suggested_price": round(totals.suggested_price, 2),
        "product_cost_method": totals.product_cost_method.value,
    }


async def resolve_client_snapshot(db: AsyncSession, user_id: str, request: QuoteCreate) -> dict:
    """
    Dados do cliente/veiculo copiados para o orcamento.

    Com client_id os dados vem do cadastro (detalhes do formulario
    prevalecem). Venda rapida sem cliente usa o texto digitado, com
    "Consumidor Final" / "N/A" quando vazio.
    """
    details = request.client_details

    if request.client_id:
        result = await db.execute(
            select(Client).where(Client.id == request.client_id, Client.user_id == user_id)
        )
        client = result.scalar_one_or_none()
        if not client:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Client not found"
            )

        vehicle_text = (request.vehicle or "").strip() or None
        vehicle_id = None
        if request.vehicle_id:
            vehicle = next((v for v in client.vehicles if v.id == request.vehicle_id), None)
            if vehicle is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Vehicle not found for this client"
                )
            vehicle_id = vehicle.id
            vehicle_text = vehicle_text or vehicle.description

        return {
            "client_id": client.id,
            "vehicle_id": vehicle_id,
            "client_name": client.name,
            "vehicle": vehicle_text,
            "client_document": client.document,
            "client_phone": details.phone or client.phone,
            "client_email": client.email,
            "client_address": details.address or client.address,
            "client_address_number": details.address_number or client.number,
            "client_complement": details.complement or client.complement,
            "client_city": client.city,
            "client_state": client.state,
            "client_zip_code": client.zip_code,
        }

    if request.vehicle_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A vehicle requires a client"
        )

    name = (request.client_name or "").strip()
    vehicle = (request.vehicle or "").strip()
    quick_sale = request.is_sale and not request.is_client_required

    if quick_sale:
        name = name or QUICK_SALE_CLIENT_NAME
        vehicle = vehicle or QUICK_SALE_VEHICLE
    elif not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Client is required"
        )

    return {
        "client_id": None,
        "vehicle_id": None,
        "client_name": name,
        "vehicle": vehicle or None,
        "client_document": None,
        "client_phone": details.phone,
        "client_email": None,
        "client_address": details.address,
        "client_address_number": details.address_number,
        "client_complement": details.complement,
        "client_city": None,
        "client_state": None,
        "client_zip_code": None,
    }
