from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from app.models.contract import ContractStatus, ContractPaymentStatus


class ContractCreate(BaseModel):
    client_name: str
    title: str
    amount: float = 0.0
    status: ContractStatus = ContractStatus.PENDING


class Contract(ContractCreate):
    id: int
    payment_status: ContractPaymentStatus
    paid_at: Optional[datetime] = None

    class Config:
        from_attributes = True
