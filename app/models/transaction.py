"""
Modèle du grand livre financier (écritures en ajout seul).
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, Text
from sqlalchemy.sql import func
import enum
from app.db.base import Base


class TransactionType(str, enum.Enum):
    REVENUE = "Revenu"
    EXPENSE = "Dépense"


class TransactionStatus(str, enum.Enum):
    COMPLETED = "Complété"
    PENDING = "En attente"
    CANCELLED = "Annulé"


class Transaction(Base):
    """Écriture comptable. Jamais modifiée ni supprimée après création."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(Text, nullable=False)
    type = Column(Enum(TransactionType), nullable=False, index=True)
    category = Column(String, nullable=True, index=True)

    # Montant signé : négatif pour une dépense
    amount = Column(Float, nullable=False)
    status = Column(Enum(TransactionStatus), default=TransactionStatus.COMPLETED, nullable=False)

    reference_number = Column(String, nullable=True, index=True)

    # Activité d'origine (référence faible : survit à la suppression de l'activité)
    activity_id = Column(Integer, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
