from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from app.models.transaction import TransactionType, TransactionStatus


class Transaction(BaseModel):
    id: int
    date: datetime
    description: str
    type: TransactionType
    category: Optional[str] = None
    amount: float
    status: TransactionStatus
    reference_number: Optional[str] = None
    activity_id: Optional[int] = None

    class Config:
        from_attributes = True


class FinancialSummary(BaseModel):
    """Résumé du grand livre : revenus, dépenses (négatives), bénéfice net."""
    total_revenue: float
    total_expenses: float
    net_profit: float
    transaction_count: int
    currency: str
