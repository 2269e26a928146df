"""
Modèles du journal d'activités clients.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, Text, Index
from sqlalchemy.sql import func
import enum
from app.db.base import Base


class PaymentType(str, enum.Enum):
    """Mode de règlement d'une activité."""
    DIRECT = "Direct"
    INSTALLMENT = "Échéancier"  # Paiement échelonné
    POINTS = "Points"  # Payé avec les points de fidélité


class Activity(Base):
    """Une ligne facturable : un article vendu ou un service rendu à un client."""
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)

    # Client (texte libre, client_id seulement si résolu)
    client_name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True, index=True)
    client_id = Column(Integer, nullable=True, index=True)

    # Article
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    quantity = Column(Integer, default=1, nullable=False)
    unit_price = Column(Float, default=0.0, nullable=False)

    # Montants (paid_amount + remaining_amount == total_amount)
    total_amount = Column(Float, nullable=False)
    paid_amount = Column(Float, default=0.0, nullable=False)
    remaining_amount = Column(Float, default=0.0, nullable=False)
    payment_type = Column(Enum(PaymentType), default=PaymentType.DIRECT, nullable=False, index=True)

    # Durée optionnelle (HH:MM)
    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)
    duration = Column(String, nullable=True)

    # Références faibles, sans clé étrangère ni cascade
    booking_id = Column(Integer, nullable=True, index=True)
    contract_id = Column(Integer, nullable=True, index=True)

    # Référence commune aux activités d'un même encaissement
    checkout_ref = Column(String, nullable=False, index=True)

    # Timestamps
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_activities_payment_type_remaining", "payment_type", "remaining_amount"),
    )

    @property
    def is_settled(self) -> bool:
        return self.remaining_amount <= 0
