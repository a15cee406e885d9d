from .auth import RegisterRequest, LoginRequest, LoginResponse, ProfileUpdate, UserResponse
from .inputs import AdjustmentInput, DurationInput, DilutionInput
from .client import ClientCreate, ClientUpdate, ClientResponse, VehicleIn, VehicleResponse
from .catalog import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ServiceProductIn,
    ServiceCreate,
    ServiceUpdate,
    ServiceResponse,
    ServiceRankingItem
)
from .payment_method import PaymentMethodCreate, PaymentMethodUpdate, PaymentMethodResponse, InstallmentRate
from .costs import (
    OperationalCostCreate,
    OperationalCostUpdate,
    OperationalCostResponse,
    OperationalHoursPayload,
    HourlyCostResponse,
    CostSummaryResponse
)
from .quote import (
    QuotedProductIn,
    QuotedServiceIn,
    QuoteCalculateRequest,
    QuoteCalculateResponse,
    QuoteTotalsResponse,
    QuoteCreate,
    QuoteStatusUpdate,
    CloseSaleRequest,
    QuoteResponse,
    AgendaResponse,
    AgendaSummary,
    SalesSummaryResponse
)
from .financial import (
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
from .lookup import AddressLookupResponse, FipeItem, FipeVehicleResponse
from .tools import DilutionMixRequest, DilutionMixResponse, ProductCostRequest, ProductCostResponse
