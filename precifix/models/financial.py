"""
Precifix Server - Financial Models
Contas, lancamentos realizados e contas a pagar/receber
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Boolean, DateTime, Date, Text, Float, ForeignKey
from sqlalchemy.orm import relationship

from precifix.database import Base


class AccountType(str, Enum):
    BANK = "bank"
    CASH = "cash"


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class PlannedItemKind(str, Enum):
    PAYABLE = "payable"        # Conta a pagar
    RECEIVABLE = "receivable"  # Conta a receber


class PlannedItemStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


TRANSFER_CATEGORY = "Transferência"


class FinancialAccount(Base):
    """Conta bancaria ou caixa"""
    __tablename__ = "financial_accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    type = Column(String(10), default=AccountType.BANK.value)
    bank_code = Column(String(10))
    color = Column(String(20))
    initial_balance = Column(Float, default=0)
    current_balance = Column(Float, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def apply(self, amount: float, type: str):
        """Aplica um lancamento ao saldo"""
        if TransactionType(type) == TransactionType.CREDIT:
            self.current_balance = (self.current_balance or 0) + amount
        else:
            self.current_balance = (self.current_balance or 0) - amount

    def revert(self, amount: float, type: str):
        """Desfaz um lancamento no saldo"""
        opposite = TransactionType.DEBIT if TransactionType(type) == TransactionType.CREDIT else TransactionType.CREDIT
        self.apply(amount, opposite.value)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "bank_code": self.bank_code,
            "color": self.color,
            "initial_balance": self.initial_balance,
            "current_balance": round(self.current_balance or 0, 2),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class FinancialTransaction(Base):
    """Lancamento realizado (entrada ou saida)"""
    __tablename__ = "financial_transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    account_id = Column(String(36), ForeignKey("financial_accounts.id"), index=True)
    account = relationship("FinancialAccount", lazy="selectin")

    amount = Column(Float, nullable=False)
    type = Column(String(10), nullable=False)  # credit, debit
    description = Column(String(255), nullable=False)
    category = Column(String(100))
    payment_method = Column(String(50))
    transaction_date = Column(Date, nullable=False)

    # Origem do lancamento (venda, conta a pagar...)
    related_entity_type = Column(String(30))
    related_entity_id = Column(String(36))

    is_deleted = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "account_id": self.account_id,
            "account_name": self.account.name if self.account else None,
            "amount": self.amount,
            "type": self.type,
            "description": self.description,
            "category": self.category,
            "payment_method": self.payment_method,
            "transaction_date": self.transaction_date.isoformat() if self.transaction_date else None,
            "related_entity_type": self.related_entity_type,
            "related_entity_id": self.related_entity_id,
            "is_deleted": self.is_deleted,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class PlannedItem(Base):
    """Conta a pagar ou a receber (ainda nao realizada)"""
    __tablename__ = "planned_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    kind = Column(String(12), nullable=False)  # payable, receivable
    description = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    counterparty = Column(String(255))
    category = Column(String(100))
    notes = Column(Text)

    account_id = Column(String(36), ForeignKey("financial_accounts.id"))

    status = Column(String(10), default=PlannedItemStatus.PENDING.value, index=True)
    paid_at = Column(DateTime)
    transaction_id = Column(String(36), ForeignKey("financial_transactions.id"))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def is_overdue(self, today=None) -> bool:
        today = today or datetime.utcnow().date()
        return self.status == PlannedItemStatus.PENDING.value and self.due_date < today

    def to_dict(self):
        return {
            "id": self.id,
            "kind": self.kind,
            "description": self.description,
            "amount": self.amount,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "counterparty": self.counterparty,
            "category": self.category,
            "notes": self.notes,
            "account_id": self.account_id,
            "status": self.status,
            "is_overdue": self.is_overdue(),
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
            "transaction_id": self.transaction_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
