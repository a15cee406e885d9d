from .auth import router as auth_router
from .clients import router as clients_router
from .products import router as products_router
from .services import router as services_router
from .payment_methods import router as payment_methods_router
from .costs import router as costs_router
from .quotes import router as quotes_router
from .financial import router as financial_router
from .lookups import router as lookups_router
from .tools import router as tools_router

__all__ = [
    "auth_router",
    "clients_router",
    "products_router",
    "services_router",
    "payment_methods_router",
    "costs_router",
    "quotes_router",
    "financial_router",
    "lookups_router",
    "tools_router"
]
