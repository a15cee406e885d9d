"""
Precifix Server - Financial API
Contas, lancamentos, transferencias e contas a pagar/receber
"""
from datetime import date, datetime
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from precifix.database import get_db
from precifix.models import (
    FinancialAccount,
    FinancialTransaction,
    PlannedItem,
    PlannedItemKind,
    PlannedItemStatus,
    TransactionType,
    TRANSFER_CATEGORY,
    User
)
from precifix.schemas import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    TransactionCreate,
    TransactionResponse,
    TransferRequest,
    PlannedItemCreate,
    PlannedItemUpdate,
    PlannedItemResponse,
    SettlePlannedItemRequest,
    BalanceResponse
)
from precifix.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/financial", tags=["Financial"])

PLANNED_ITEM_ENTITY_TYPE = "planned_item"


async def _get_account(db: AsyncSession, user: User, account_id: str) -> FinancialAccount:
    result = await db.execute(
        select(FinancialAccount).where(FinancialAccount.id == account_id, FinancialAccount.user_id == user.id)
    )
    account = result.scalar_one_or_none()

    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found"
        )
    return account


async def _get_planned_item(db: AsyncSession, user: User, item_id: str) -> PlannedItem:
    result = await db.execute(
        select(PlannedItem).where(PlannedItem.id == item_id, PlannedItem.user_id == user.id)
    )
    item = result.scalar_one_or_none()

    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Planned item not found"
        )
    return item


# ============================================================
# CONTAS
# ============================================================

@router.get("/accounts", response_model=List[AccountResponse])
async def list_accounts(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    result = await db.execute(
        select(FinancialAccount)
        .where(FinancialAccount.user_id == user.id)
        .order_by(FinancialAccount.name)
    )
    return [a.to_dict() for a in result.scalars().all()]


@router.post("/accounts", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    request: AccountCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Cria conta; saldo atual comeca igual ao inicial"""
    data = request.model_dump()
    data["type"] = request.type.value
    account = FinancialAccount(user_id=user.id, current_balance=request.initial_balance, **data)
    db.add(account)
    await db.commit()
    return account.to_dict()


@router.get("/accounts/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    account = await _get_account(db, user, account_id)
    return account.to_dict()


@router.put("/accounts/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str,
    request: AccountUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Atualiza dados cadastrais (saldo so muda por lancamentos)"""
    account = await _get_account(db, user, account_id)

    update_data = request.model_dump(exclude_unset=True)
    if update_data.get("type") is not None:
        update_data["type"] = update_data["type"].value
    for field, value in update_data.items():
        setattr(account, field, value)

    await db.commit()
    return account.to_dict()


@router.delete("/accounts/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Remove conta sem lancamentos ativos"""
    account = await _get_account(db, user, account_id)

    result = await db.execute(
        select(func.count(FinancialTransaction.id)).where(
            FinancialTransaction.account_id == account.id,
            FinancialTransaction.is_deleted == False  # noqa: E712
        )
    )
    if result.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account has transactions"
        )

    await db.delete(account)
    await db.commit()


# ============================================================
# LANCAMENTOS
# ============================================================

@router.get("/transactions", response_model=List[TransactionResponse])
async def list_transactions(
    account_id: Optional[str] = Query(None),
    type: Optional[TransactionType] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    include_deleted: bool = Query(False),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    query = select(FinancialTransaction).where(FinancialTransaction.user_id == user.id)

    if not include_deleted:
        query = query.where(FinancialTransaction.is_deleted == False)  # noqa: E712
    if account_id:
        query = query.where(FinancialTransaction.account_id == account_id)
    if type:
        query = query.where(FinancialTransaction.type == type.value)
    if date_from:
        query = query.where(FinancialTransaction.transaction_date >= date_from)
    if date_to:
        query = query.where(FinancialTransaction.transaction_date <= date_to)

    query = query.order_by(
        FinancialTransaction.transaction_date.desc(),
        FinancialTransaction.created_at.desc()
    ).offset(skip).limit(limit)

    result = await db.execute(query)
    return [t.to_dict() for t in result.scalars().all()]


@router.post("/transactions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    request: TransactionCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Lanca entrada/saida e atualiza o saldo da conta"""
    account = await _get_account(db, user, request.account_id) if request.account_id else None

    data = request.model_dump()
    data["type"] = request.type.value
    data["transaction_date"] = request.transaction_date or date.today()

    transaction = FinancialTransaction(user_id=user.id, account=account, **data)
    if account:
        account.apply(transaction.amount, transaction.type)

    db.add(transaction)
    await db.commit()

    return transaction.to_dict()


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Exclusao logica: marca is_deleted e desfaz o efeito no saldo"""
    result = await db.execute(
        select(FinancialTransaction).where(
            FinancialTransaction.id == transaction_id,
            FinancialTransaction.user_id == user.id
        )
    )
    transaction = result.scalar_one_or_none()

    if not transaction or transaction.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found"
        )

    transaction.is_deleted = True
    if transaction.account:
        transaction.account.revert(transaction.amount, transaction.type)

    # Baixa desfeita: a conta a pagar/receber volta a ficar pendente
    if transaction.related_entity_type == PLANNED_ITEM_ENTITY_TYPE and transaction.related_entity_id:
        result = await db.execute(
            select(PlannedItem).where(
                PlannedItem.id == transaction.related_entity_id,
                PlannedItem.user_id == user.id
            )
        )
        item = result.scalar_one_or_none()
        if item and item.transaction_id == transaction.id:
            item.status = PlannedItemStatus.PENDING.value
            item.paid_at = None
            item.transaction_id = None

    await db.commit()
    logger.info(f"Lancamento removido: {transaction_id}")


@router.post("/transfer", response_model=List[TransactionResponse], status_code=status.HTTP_201_CREATED)
async def transfer(
    request: TransferRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Transferencia entre contas: debito na origem e credito no destino"""
    if request.from_account_id == request.to_account_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Source and destination accounts must differ"
        )

    source = await _get_account(db, user, request.from_account_id)
    destination = await _get_account(db, user, request.to_account_id)
    transfer_date = request.transfer_date or date.today()

    debit = FinancialTransaction(
        user_id=user.id,
        account=source,
        amount=request.amount,
        type=TransactionType.DEBIT.value,
        description=f"Transferência para {destination.name}",
        category=TRANSFER_CATEGORY,
        transaction_date=transfer_date
    )
    credit = FinancialTransaction(
        user_id=user.id,
        account=destination,
        amount=request.amount,
        type=TransactionType.CREDIT.value,
        description=f"Transferência de {source.name}",
        category=TRANSFER_CATEGORY,
        transaction_date=transfer_date
    )
    source.apply(request.amount, TransactionType.DEBIT.value)
    destination.apply(request.amount, TransactionType.CREDIT.value)

    db.add_all([debit, credit])
    await db.commit()

    logger.info(f"Transferencia de {request.amount:.2f} entre {source.id} e {destination.id}")
    return [debit.to_dict(), credit.to_dict()]


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Saldo consolidado e pendencias"""
    accounts = await db.execute(
        select(FinancialAccount).where(FinancialAccount.user_id == user.id)
    )
    accounts = accounts.scalars().all()

    pending = await db.execute(
        select(PlannedItem.kind, func.coalesce(func.sum(PlannedItem.amount), 0))
        .where(PlannedItem.user_id == user.id, PlannedItem.status == PlannedItemStatus.PENDING.value)
        .group_by(PlannedItem.kind)
    )
    pending_by_kind = {kind: float(total) for kind, total in pending.all()}

    return BalanceResponse(
        total_balance=round(sum(a.current_balance or 0 for a in accounts), 2),
        accounts=len(accounts),
        pending_payables=round(pending_by_kind.get(PlannedItemKind.PAYABLE.value, 0.0), 2),
        pending_receivables=round(pending_by_kind.get(PlannedItemKind.RECEIVABLE.value, 0.0), 2)
    )


# ============================================================
# CONTAS A PAGAR / RECEBER
# ============================================================

@router.get("/planned", response_model=List[PlannedItemResponse])
async def list_planned_items(
    kind: Optional[PlannedItemKind] = Query(None),
    item_status: Optional[PlannedItemStatus] = Query(None, alias="status"),
    overdue: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Lista contas a pagar/receber; overdue=true traz so as vencidas"""
    query = select(PlannedItem).where(PlannedItem.user_id == user.id)

    if kind:
        query = query.where(PlannedItem.kind == kind.value)
    if item_status:
        query = query.where(PlannedItem.status == item_status.value)
    if overdue:
        query = query.where(
            PlannedItem.status == PlannedItemStatus.PENDING.value,
            PlannedItem.due_date < date.today()
        )

    result = await db.execute(query.order_by(PlannedItem.due_date))
    return [i.to_dict() for i in result.scalars().all()]


@router.post("/planned", response_model=PlannedItemResponse, status_code=status.HTTP_201_CREATED)
async def create_planned_item(
    request: PlannedItemCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    if request.account_id:
        await _get_account(db, user, request.account_id)

    data = request.model_dump()
    data["kind"] = request.kind.value
    item = PlannedItem(user_id=user.id, status=PlannedItemStatus.PENDING.value, **data)
    db.add(item)
    await db.commit()
    return item.to_dict()


@router.put("/planned/{item_id}", response_model=PlannedItemResponse)
async def update_planned_item(
    item_id: str,
    request: PlannedItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    item = await _get_planned_item(db, user, item_id)

    if item.status == PlannedItemStatus.PAID.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Paid items cannot be changed"
        )

    update_data = request.model_dump(exclude_unset=True)
    if update_data.get("account_id"):
        await _get_account(db, user, update_data["account_id"])
    for field, value in update_data.items():
        setattr(item, field, value)

    await db.commit()
    return item.to_dict()


@router.post("/planned/{item_id}/settle", response_model=PlannedItemResponse)
async def settle_planned_item(
    item_id: str,
    request: Optional[SettlePlannedItemRequest] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Baixa a conta: cria o lancamento realizado (debito para pagar,
    credito para receber) e marca como paga na mesma transacao.
    """
    request = request or SettlePlannedItemRequest()
    item = await _get_planned_item(db, user, item_id)

    if item.status == PlannedItemStatus.PAID.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Item already paid"
        )

    account_id = request.account_id or item.account_id
    account = await _get_account(db, user, account_id) if account_id else None

    transaction_type = (
        TransactionType.DEBIT if item.kind == PlannedItemKind.PAYABLE.value else TransactionType.CREDIT
    )
    transaction = FinancialTransaction(
        user_id=user.id,
        account=account,
        amount=item.amount,
        type=transaction_type.value,
        description=item.description,
        category=item.category,
        transaction_date=request.payment_date or date.today(),
        related_entity_type=PLANNED_ITEM_ENTITY_TYPE,
        related_entity_id=item.id
    )
    if account:
        account.apply(item.amount, transaction_type.value)
    db.add(transaction)
    await db.flush()

    item.status = PlannedItemStatus.PAID.value
    item.paid_at = datetime.utcnow()
    item.account_id = account.id if account else None
    item.transaction_id = transaction.id

    await db.commit()

    logger.info(f"Conta {item.kind} baixada: {item.id} ({item.amount:.2f})")
    return item.to_dict()


@router.delete("/planned/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_planned_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    item = await _get_planned_item(db, user, item_id)
    await db.delete(item)
    await db.commit()
