from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from app.models.activity import PaymentType
from app.schemas.transaction import Transaction


class ClientInfo(BaseModel):
    """Identité du client pour un encaissement."""
    client_name: str
    phone: Optional[str] = None
    client_id: Optional[int] = None  # Requis pour un paiement en points


class ActivityItemCreate(BaseModel):
    description: str
    category: str
    quantity: int = 1
    unit_price: float = Field(..., allow_inf_nan=False)
    amount: Optional[float] = Field(None, allow_inf_nan=False)  # quantity * unit_price, calculé si absent
    start_time: Optional[str] = None  # HH:MM
    end_time: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v):
        if v < 1:
            raise ValueError("La quantité doit être supérieure à 0")
        return v

    @field_validator("unit_price")
    @classmethod
    def validate_unit_price(cls, v):
        if v < 0:
            raise ValueError("Le prix unitaire ne peut pas être négatif")
        return v

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        if v is not None and v < 0:
            raise ValueError("Le montant ne peut pas être négatif")
        return v


class CheckoutRequest(ClientInfo):
    """Encaissement de plusieurs articles pour un même client."""
    items: List[ActivityItemCreate]
    payment_type: PaymentType = PaymentType.DIRECT
    paid_amount: Optional[float] = Field(None, allow_inf_nan=False)  # Acompte, pour un échéancier
    contract_id: Optional[int] = None
    booking_id: Optional[int] = None

    @field_validator("items")
    @classmethod
    def validate_items(cls, v):
        if not v:
            raise ValueError("Un encaissement doit contenir au moins un article")
        return v

    @field_validator("paid_amount")
    @classmethod
    def validate_paid_amount(cls, v):
        if v is not None and v < 0:
            raise ValueError("L'acompte ne peut pas être négatif")
        return v


class Activity(BaseModel):
    id: int
    client_name: str
    phone: Optional[str] = None
    client_id: Optional[int] = None
    description: str
    category: str
    quantity: int
    unit_price: float
    total_amount: float
    paid_amount: float
    remaining_amount: float
    payment_type: PaymentType
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[str] = None
    booking_id: Optional[int] = None
    contract_id: Optional[int] = None
    checkout_ref: str
    date: datetime

    class Config:
        from_attributes = True


class CheckoutResult(BaseModel):
    checkout_ref: str
    count: int
    points_debited: int = 0
    activities: List[Activity]
    transactions: List[Transaction] = []

    class Config:
        from_attributes = True


class InstallmentRequest(BaseModel):
    amount: float = Field(..., allow_inf_nan=False)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError("Le montant doit être positif")
        return v


class InstallmentResult(BaseModel):
    activity: Activity
    transaction: Transaction
    settled: bool

    class Config:
        from_attributes = True


class CancelPaymentResult(BaseModel):
    booking_id: int
    deleted_count: int


class RevenueSummary(BaseModel):
    total_revenue: float
    outstanding_balance: float
    activity_count: int
    currency: str
