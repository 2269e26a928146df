from app.schemas.activity import (
    ClientInfo,
    ActivityItemCreate,
    CheckoutRequest,
    Activity,
    CheckoutResult,
    InstallmentRequest,
    InstallmentResult,
    CancelPaymentResult,
    RevenueSummary,
)
from app.schemas.transaction import Transaction, FinancialSummary
from app.schemas.client import Client, ClientCreate, ClientUpdate, PointsAdjustment, ClientSummary
from app.schemas.category import (
    ActivityCategory,
    ActivityCategoryCreate,
    ActivityCategoryUpdate,
    CategoryImportResult,
)
from app.schemas.booking import Booking, BookingCreate
from app.schemas.contract import Contract, ContractCreate
from app.schemas.token import Token
from app.schemas.user import User, UserLogin

__all__ = [
    "ClientInfo",
    "ActivityItemCreate",
    "CheckoutRequest",
    "Activity",
    "CheckoutResult",
    "InstallmentRequest",
    "InstallmentResult",
    "CancelPaymentResult",
    "RevenueSummary",
    "Transaction",
    "FinancialSummary",
    "Client",
    "ClientCreate",
    "ClientUpdate",
    "PointsAdjustment",
    "ClientSummary",
    "ActivityCategory",
    "ActivityCategoryCreate",
    "ActivityCategoryUpdate",
    "CategoryImportResult",
    "Booking",
    "BookingCreate",
    "Contract",
    "ContractCreate",
    "Token",
    "User",
    "UserLogin",
]
