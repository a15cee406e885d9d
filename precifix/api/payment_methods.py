"""
Precifix Server - Payment Methods API
Formas de pagamento; cartao de credito sempre tem as 12 parcelas
"""
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from precifix.database import get_db
from precifix.models import PaymentMethod, PaymentMethodInstallment, MAX_INSTALLMENTS, Quote, User
from precifix.schemas import PaymentMethodCreate, PaymentMethodUpdate, PaymentMethodResponse, InstallmentRate
from precifix.core.pricing import PaymentMethodType
from precifix.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payment-methods", tags=["Payment Methods"])


async def _get_method(db: AsyncSession, user: User, method_id: str, reload: bool = False) -> PaymentMethod:
    query = select(PaymentMethod).where(PaymentMethod.id == method_id, PaymentMethod.user_id == user.id)
    if reload:
        query = query.execution_options(populate_existing=True)

    result = await db.execute(query)
    method = result.scalar_one_or_none()

    if not method:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment method not found"
        )
    return method


def _rates_by_count(rates: List[InstallmentRate]) -> dict:
    by_count = {}
    for item in rates:
        if item.installments in by_count:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Duplicated installment: {item.installments}x"
            )
        by_count[item.installments] = item.rate
    return by_count


@router.get("", response_model=List[PaymentMethodResponse])
async def list_payment_methods(
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    query = select(PaymentMethod).where(PaymentMethod.user_id == user.id)
    if is_active is not None:
        query = query.where(PaymentMethod.is_active == is_active)

    result = await db.execute(query.order_by(PaymentMethod.name))
    return [m.to_dict() for m in result.scalars().all()]


@router.get("/{method_id}", response_model=PaymentMethodResponse)
async def get_payment_method(
    method_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    method = await _get_method(db, user, method_id)
    return method.to_dict()


@router.post("", response_model=PaymentMethodResponse, status_code=status.HTTP_201_CREATED)
async def create_payment_method(
    request: PaymentMethodCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Cria forma de pagamento; credito gera parcelas 1..12"""
    method = PaymentMethod(
        user_id=user.id,
        name=request.name,
        type=request.type.value,
        rate=request.rate,
        is_active=request.is_active
    )

    if request.type == PaymentMethodType.CREDIT_CARD:
        rates = _rates_by_count(request.installments)
        method.installments = [
            PaymentMethodInstallment(installments=count, rate=rates.get(count, 0.0))
            for count in range(1, MAX_INSTALLMENTS + 1)
        ]
    elif request.installments:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only credit card methods have installment rates"
        )

    db.add(method)
    await db.commit()

    method = await _get_method(db, user, method.id, reload=True)
    return method.to_dict()


@router.put("/{method_id}", response_model=PaymentMethodResponse)
async def update_payment_method(
    method_id: str,
    request: PaymentMethodUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Atualiza forma de pagamento e taxas por parcela"""
    method = await _get_method(db, user, method_id)

    update_data = request.model_dump(exclude_unset=True, exclude={"installments"})
    for field, value in update_data.items():
        setattr(method, field, value)

    if request.installments is not None:
        if method.type != PaymentMethodType.CREDIT_CARD.value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only credit card methods have installment rates"
            )
        rates = _rates_by_count(request.installments)
        existing = {i.installments: i for i in method.installments}
        for count in range(1, MAX_INSTALLMENTS + 1):
            row = existing.get(count)
            if row is None:
                method.installments.append(
                    PaymentMethodInstallment(installments=count, rate=rates.get(count, 0.0))
                )
            elif count in rates:
                row.rate = rates[count]

    await db.commit()

    method = await _get_method(db, user, method_id, reload=True)
    return method.to_dict()


@router.delete("/{method_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment_method(
    method_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    method = await _get_method(db, user, method_id)

    await db.execute(
        update(Quote)
        .where(Quote.user_id == user.id, Quote.payment_method_id == method.id)
        .values(payment_method_id=None)
    )
    await db.delete(method)
    await db.commit()
