"""
Precifix Server - Quotes API
Orcamentos, vendas, agenda e documento do orcamento
"""
from datetime import date, datetime, timedelta
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from precifix.database import get_db
from precifix.models import (
    Quote,
    QuoteStatus,
    FinancialAccount,
    FinancialTransaction,
    TransactionType,
    QUICK_SALE_VEHICLE,
    TRANSFER_CATEGORY,
    User
)
from precifix.schemas import (
    QuoteCalculateRequest,
    QuoteCalculateResponse,
    QuoteCreate,
    QuoteStatusUpdate,
    CloseSaleRequest,
    QuoteResponse,
    AgendaResponse,
    SalesSummaryResponse
)
from precifix.services.quote_service import (
    calculate_quote,
    load_payment_method,
    resolve_client_snapshot,
    totals_to_dict
)
from precifix.utils.quoteGenerator import generate_quote_pdf
from precifix.core import settings
from precifix.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["Quotes"])

SALE_ENTITY_TYPE = "quote"


async def _get_quote(db: AsyncSession, user: User, quote_id: str) -> Quote:
    result = await db.execute(
        select(Quote).where(Quote.id == quote_id, Quote.user_id == user.id)
    )
    quote = result.scalar_one_or_none()

    if not quote:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Quote not found"
        )
    return quote


async def _sale_transactions(db: AsyncSession, quote: Quote) -> List[FinancialTransaction]:
    """Lancamentos ativos gerados pelo fechamento da venda"""
    result = await db.execute(
        select(FinancialTransaction).where(
            FinancialTransaction.user_id == quote.user_id,
            FinancialTransaction.related_entity_type == SALE_ENTITY_TYPE,
            FinancialTransaction.related_entity_id == quote.id,
            FinancialTransaction.is_deleted == False  # noqa: E712
        )
    )
    return list(result.scalars().all())


def _reverse_transactions(transactions: List[FinancialTransaction]):
    for transaction in transactions:
        transaction.is_deleted = True
        if transaction.account:
            transaction.account.revert(transaction.amount, transaction.type)


async def _apply_request(db: AsyncSession, user: User, quote: Quote, request: QuoteCreate):
    """Recalcula e grava tudo o que vem do formulario no orcamento"""
    calculation = await calculate_quote(db, user.id, request)
    client_data = await resolve_client_snapshot(db, user.id, request)
    totals = calculation.totals

    for field, value in client_data.items():
        setattr(quote, field, value)

    quote.services_summary = calculation.services_summary
    quote.subtotal = round(totals.total_service_value, 2)
    quote.discount_value = round(totals.calculated_discount, 2)
    quote.discount_type = request.discount.type.value
    quote.discount_input = request.discount.amount()
    quote.commission_value = round(totals.calculated_commission, 2)
    quote.commission_type = request.commission.type.value
    quote.commission_input = request.commission.amount()
    quote.other_costs_global = request.other_costs_global
    quote.total_price = round(totals.value_after_discount, 2)
    quote.payment_fee = round(totals.payment_fee, 2)
    quote.total_cost = round(totals.total_cost, 2)
    quote.net_profit = round(totals.net_profit, 2)

    quote.payment_method_id = calculation.payment_method.id if calculation.payment_method else None
    quote.installments = request.installments

    quote.is_sale = request.is_sale
    if request.is_sale:
        quote.status = QuoteStatus.CLOSED.value
        quote.closed_at = quote.closed_at or datetime.utcnow()
    else:
        quote.status = request.status.value

    quote.quote_date = request.quote_date or quote.quote_date or date.today()
    quote.valid_until = quote.quote_date + timedelta(days=settings.QUOTE_VALIDITY_DAYS)
    quote.service_date = request.service_date
    quote.service_time = request.service_time
    quote.notes = request.notes


@router.post("/calculate", response_model=QuoteCalculateResponse)
async def calculate(
    request: QuoteCalculateRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Calcula totais sem gravar (tela de orcamento)"""
    calculation = await calculate_quote(db, user.id, request)
    return {
        "totals": totals_to_dict(calculation.totals),
        "services": calculation.services_summary
    }


@router.get("", response_model=List[QuoteResponse])
async def list_quotes(
    quote_status: Optional[QuoteStatus] = Query(None, alias="status"),
    is_sale: Optional[bool] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    search: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Lista orcamentos/vendas"""
    query = select(Quote).where(Quote.user_id == user.id)

    if quote_status:
        query = query.where(Quote.status == quote_status.value)
    if is_sale is not None:
        query = query.where(Quote.is_sale == is_sale)
    if date_from:
        query = query.where(Quote.quote_date >= date_from)
    if date_to:
        query = query.where(Quote.quote_date <= date_to)
    if search:
        query = query.where(
            or_(
                Quote.client_name.ilike(f"%{search}%"),
                Quote.vehicle.ilike(f"%{search}%")
            )
        )

    query = query.order_by(Quote.quote_date.desc(), Quote.created_at.desc()).offset(skip).limit(limit)

    result = await db.execute(query)
    return [q.to_dict() for q in result.scalars().all()]


@router.get("/agenda", response_model=AgendaResponse)
async def get_agenda(
    day: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Servicos agendados no dia, por horario"""
    day = day or date.today()

    result = await db.execute(
        select(Quote)
        .where(
            Quote.user_id == user.id,
            Quote.service_date == day,
            Quote.status != QuoteStatus.REJECTED.value
        )
        .order_by(Quote.service_time.is_(None), Quote.service_time, Quote.created_at)
    )
    quotes = result.scalars().all()

    def count(value: QuoteStatus) -> int:
        return sum(1 for q in quotes if q.status == value.value)

    return {
        "date": day,
        "summary": {
            "count": len(quotes),
            "total_value": round(sum(q.total_price or 0 for q in quotes), 2),
            "pending": count(QuoteStatus.PENDING),
            "accepted": count(QuoteStatus.ACCEPTED),
            "closed": count(QuoteStatus.CLOSED)
        },
        "quotes": [q.to_dict() for q in quotes]
    }


@router.get("/summary", response_model=SalesSummaryResponse)
async def get_sales_summary(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Resumo do periodo (painel e tela de vendas).

    Faturamento = vendas fechadas; liquido = faturamento menos saidas
    realizadas no periodo (transferencias entre contas nao contam).
    """
    query = select(Quote).where(Quote.user_id == user.id)
    if date_from:
        query = query.where(Quote.quote_date >= date_from)
    if date_to:
        query = query.where(Quote.quote_date <= date_to)
    quotes = (await db.execute(query)).scalars().all()

    expenses_query = select(func.coalesce(func.sum(FinancialTransaction.amount), 0)).where(
        FinancialTransaction.user_id == user.id,
        FinancialTransaction.type == TransactionType.DEBIT.value,
        FinancialTransaction.is_deleted == False,  # noqa: E712
        or_(FinancialTransaction.category.is_(None), FinancialTransaction.category != TRANSFER_CATEGORY)
    )
    if date_from:
        expenses_query = expenses_query.where(FinancialTransaction.transaction_date >= date_from)
    if date_to:
        expenses_query = expenses_query.where(FinancialTransaction.transaction_date <= date_to)
    expenses = float((await db.execute(expenses_query)).scalar_one())

    def by_status(value: QuoteStatus) -> list:
        return [q for q in quotes if q.status == value.value]

    closed = by_status(QuoteStatus.CLOSED)
    pending = by_status(QuoteStatus.PENDING)
    accepted = by_status(QuoteStatus.ACCEPTED)
    revenue = sum(q.total_price or 0 for q in closed)

    vehicles = set()
    for q in closed:
        if q.vehicle_id:
            vehicles.add(q.vehicle_id)
        elif q.vehicle and q.vehicle != QUICK_SALE_VEHICLE:
            vehicles.add(q.vehicle.strip().lower())

    return SalesSummaryResponse(
        date_from=date_from,
        date_to=date_to,
        revenue=round(revenue, 2),
        expenses=round(expenses, 2),
        net_revenue=round(revenue - expenses, 2),
        completed_services=len(closed),
        vehicles_serviced=len(vehicles),
        average_ticket=round(revenue / len(closed), 2) if closed else 0.0,
        pending_count=len(pending),
        pending_value=round(sum(q.total_price or 0 for q in pending), 2),
        accepted_count=len(accepted),
        accepted_value=round(sum(q.total_price or 0 for q in accepted), 2),
        rejected_count=len(by_status(QuoteStatus.REJECTED))
    )


@router.get("/{quote_id}", response_model=QuoteResponse)
async def get_quote(
    quote_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    quote = await _get_quote(db, user, quote_id)
    return quote.to_dict()


@router.post("", response_model=QuoteResponse, status_code=status.HTTP_201_CREATED)
async def create_quote(
    request: QuoteCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Grava orcamento (ou venda rapida) com a copia dos servicos"""
    if not request.services:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one service is required"
        )

    quote = Quote(user_id=user.id)
    await _apply_request(db, user, quote, request)

    db.add(quote)
    await db.commit()

    logger.info(f"Orcamento criado: {quote.id} - {quote.client_name} - R$ {quote.total_price:.2f}")
    return quote.to_dict()


@router.put("/{quote_id}", response_model=QuoteResponse)
async def update_quote(
    quote_id: str,
    request: QuoteCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Substitui os dados do orcamento e recalcula"""
    quote = await _get_quote(db, user, quote_id)

    if quote.status == QuoteStatus.CLOSED.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Closed sales cannot be edited"
        )

    if not request.services:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one service is required"
        )

    await _apply_request(db, user, quote, request)
    await db.commit()

    return quote.to_dict()


@router.patch("/{quote_id}/status", response_model=QuoteResponse)
async def update_quote_status(
    quote_id: str,
    request: QuoteStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Muda o status; reabrir uma venda fechada estorna a entrada lancada"""
    quote = await _get_quote(db, user, quote_id)

    if request.status == QuoteStatus.CLOSED:
        quote.is_sale = True
        quote.closed_at = quote.closed_at or datetime.utcnow()
    elif quote.status == QuoteStatus.CLOSED.value:
        reversed_transactions = await _sale_transactions(db, quote)
        _reverse_transactions(reversed_transactions)
        quote.is_sale = False
        quote.closed_at = None
        if reversed_transactions:
            logger.info(f"Venda {quote.id} reaberta: {len(reversed_transactions)} lancamento(s) estornado(s)")
    quote.status = request.status.value

    await db.commit()
    return quote.to_dict()


@router.post("/{quote_id}/close", response_model=QuoteResponse)
async def close_sale(
    quote_id: str,
    request: Optional[CloseSaleRequest] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Fecha a venda. Com account_id lanca a entrada do valor da venda
    na conta, na mesma transacao.
    """
    request = request or CloseSaleRequest()
    quote = await _get_quote(db, user, quote_id)

    quote.status = QuoteStatus.CLOSED.value
    quote.is_sale = True
    quote.closed_at = quote.closed_at or datetime.utcnow()

    if request.account_id:
        if await _sale_transactions(db, quote):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Sale payment already recorded"
            )

        result = await db.execute(
            select(FinancialAccount).where(
                FinancialAccount.id == request.account_id,
                FinancialAccount.user_id == user.id
            )
        )
        account = result.scalar_one_or_none()
        if not account:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Account not found"
            )

        if (quote.total_price or 0) > 0:
            method = await load_payment_method(db, user.id, quote.payment_method_id) if quote.payment_method_id else None
            transaction = FinancialTransaction(
                user_id=user.id,
                account_id=account.id,
                account=account,
                amount=quote.total_price,
                type=TransactionType.CREDIT.value,
                description=f"Venda - {quote.client_name}",
                category="Vendas",
                payment_method=method.type if method else None,
                transaction_date=request.payment_date or date.today(),
                related_entity_type=SALE_ENTITY_TYPE,
                related_entity_id=quote.id
            )
            account.apply(transaction.amount, transaction.type)
            db.add(transaction)
        else:
            logger.info(f"Venda {quote.id} sem valor: nenhum lancamento criado")

    await db.commit()

    logger.info(f"Venda fechada: {quote.id}")
    return quote.to_dict()


@router.post("/{quote_id}/not-realized", response_model=QuoteResponse)
async def mark_not_realized(
    quote_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Servico agendado que nao aconteceu"""
    quote = await _get_quote(db, user, quote_id)
    if quote.status == QuoteStatus.CLOSED.value:
        _reverse_transactions(await _sale_transactions(db, quote))
        quote.is_sale = False
        quote.closed_at = None
    quote.status = QuoteStatus.REJECTED.value
    await db.commit()
    return quote.to_dict()


@router.get("/{quote_id}/pdf")
async def get_quote_pdf(
    quote_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Documento do orcamento para impressao/envio"""
    quote = await _get_quote(db, user, quote_id)

    method = None
    if quote.payment_method_id:
        method = await load_payment_method(db, user.id, quote.payment_method_id)

    pdf_bytes = generate_quote_pdf(
        quote.to_dict(),
        company_data=user.to_dict(),
        payment_method=method.to_dict() if method else None
    )

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="orcamento-{quote.id[:8]}.pdf"'}
    )


@router.delete("/{quote_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quote(
    quote_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Remove o orcamento; lancamentos da venda sao estornados"""
    quote = await _get_quote(db, user, quote_id)

    _reverse_transactions(await _sale_transactions(db, quote))
    await db.delete(quote)
    await db.commit()

    logger.info(f"Orcamento removido: {quote_id}")
