from sqlalchemy import Column, Integer, String, Float, DateTime, Enum
from sqlalchemy.sql import func
import enum
from app.db.base import Base


class ContractStatus(str, enum.Enum):
    SIGNED = "Signé"
    SENT = "Envoyé"
    PENDING = "En attente"
    ARCHIVED = "Archivé"


class ContractPaymentStatus(str, enum.Enum):
    PAID = "Payé"
    UNPAID = "Non Payé"


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, index=True)
    client_name = Column(String, nullable=False)
    title = Column(String, nullable=False)
    amount = Column(Float, default=0.0, nullable=False)
    status = Column(Enum(ContractStatus), default=ContractStatus.PENDING, nullable=False)
    payment_status = Column(Enum(ContractPaymentStatus), default=ContractPaymentStatus.UNPAID, nullable=False, index=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
