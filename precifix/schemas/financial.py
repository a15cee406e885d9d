"""
Precifix Server - Financial Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from precifix.models.financial import AccountType, TransactionType, PlannedItemKind


class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType = AccountType.BANK
    bank_code: Optional[str] = Field(None, max_length=10)
    color: Optional[str] = Field(None, max_length=20)
    initial_balance: float = 0


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[AccountType] = None
    bank_code: Optional[str] = Field(None, max_length=10)
    color: Optional[str] = Field(None, max_length=20)


class AccountResponse(BaseModel):
    id: str
    name: str
    type: str
    bank_code: Optional[str] = None
    color: Optional[str] = None
    initial_balance: float = 0
    current_balance: float = 0
    created_at: Optional[datetime] = None


class TransactionCreate(BaseModel):
    account_id: Optional[str] = None
    amount: float = Field(..., gt=0)
    type: TransactionType
    description: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    payment_method: Optional[str] = Field(None, max_length=50)
    transaction_date: Optional[date] = None
    related_entity_type: Optional[str] = Field(None, max_length=30)
    related_entity_id: Optional[str] = None


class TransactionResponse(BaseModel):
    id: str
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    amount: float
    type: str
    description: str
    category: Optional[str] = None
    payment_method: Optional[str] = None
    transaction_date: Optional[date] = None
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[str] = None
    is_deleted: bool = False
    created_at: Optional[datetime] = None


class TransferRequest(BaseModel):
    from_account_id: str
    to_account_id: str
    amount: float = Field(..., gt=0)
    transfer_date: Optional[date] = None


class PlannedItemCreate(BaseModel):
    kind: PlannedItemKind
    description: str = Field(..., min_length=1, max_length=255)
    amount: float = Field(..., gt=0)
    due_date: date
    counterparty: Optional[str] = Field(None, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    account_id: Optional[str] = None
    notes: Optional[str] = None


class PlannedItemUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[float] = Field(None, gt=0)
    due_date: Optional[date] = None
    counterparty: Optional[str] = Field(None, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    account_id: Optional[str] = None
    notes: Optional[str] = None


class SettlePlannedItemRequest(BaseModel):
    account_id: Optional[str] = None  # Sobrescreve a conta do item
    payment_date: Optional[date] = None


class PlannedItemResponse(BaseModel):
    id: str
    kind: str
    description: str
    amount: float
    due_date: date
    counterparty: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    account_id: Optional[str] = None
    status: str
    is_overdue: bool = False
    paid_at: Optional[datetime] = None
    transaction_id: Optional[str] = None
    created_at: Optional[datetime] = None


class BalanceResponse(BaseModel):
    total_balance: float
    accounts: int
    pending_payables: float
    pending_receivables: float
