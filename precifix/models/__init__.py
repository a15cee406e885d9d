from .user import User
from .client import Client, Vehicle
from .catalog import Product, Service, ServiceProductLink
from .payment_method import PaymentMethod, PaymentMethodInstallment, MAX_INSTALLMENTS
from .costs import OperationalCost, OperationalHours
from .quote import Quote, QuoteStatus, QUICK_SALE_CLIENT_NAME, QUICK_SALE_VEHICLE
from .financial import (
    FinancialAccount,
    FinancialTransaction,
    PlannedItem,
    AccountType,
    TransactionType,
    PlannedItemKind,
    PlannedItemStatus,
    TRANSFER_CATEGORY
)

__all__ = [
    "User",
    "Client",
    "Vehicle",
    "Product",
    "Service",
    "ServiceProductLink",
    "PaymentMethod",
    "PaymentMethodInstallment",
    "MAX_INSTALLMENTS",
    "OperationalCost",
    "OperationalHours",
    "Quote",
    "QuoteStatus",
    "QUICK_SALE_CLIENT_NAME",
    "QUICK_SALE_VEHICLE",
    "FinancialAccount",
    "FinancialTransaction",
    "PlannedItem",
    "AccountType",
    "TransactionType",
    "PlannedItemKind",
    "PlannedItemStatus",
    "TRANSFER_CATEGORY"
]
