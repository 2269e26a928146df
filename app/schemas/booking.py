from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from app.models.booking import BookingStatus


class BookingCreate(BaseModel):
    client_name: str
    phone: Optional[str] = None
    service: str
    date: datetime
    amount: float = 0.0


class Booking(BookingCreate):
    id: int
    status: BookingStatus

    class Config:
        from_attributes = True
