from app.models.user import User
from app.models.activity import Activity, PaymentType
from app.models.transaction import Transaction, TransactionType, TransactionStatus
from app.models.client import Client
from app.models.category import ActivityCategory
from app.models.booking import Booking, BookingStatus
from app.models.contract import Contract, ContractStatus, ContractPaymentStatus

__all__ = [
    "User",
    "Activity",
    "PaymentType",
    "Transaction",
    "TransactionType",
    "TransactionStatus",
    "Client",
    "ActivityCategory",
    "Booking",
    "BookingStatus",
    "Contract",
    "ContractStatus",
    "ContractPaymentStatus",
]
