"""Grand livre financier : écritures en ajout seul."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.transaction import Transaction, TransactionStatus, TransactionType


@dataclass
class TransactionEntry:
    """Écriture à ajouter au grand livre."""

    description: str
    type: TransactionType
    amount: float
    category: Optional[str] = None
    status: TransactionStatus = TransactionStatus.COMPLETED
    date: Optional[datetime] = None
    reference_number: Optional[str] = None
    activity_id: Optional[int] = None


def add_transaction(db: Session, entry: TransactionEntry) -> Transaction:
    """Ajoute une écriture à la session courante, sans commit.

    L'écriture fait partie de l'unité de travail de l'appelant : elle est
    validée ou annulée avec le reste de l'opération.
    """
    transaction = Transaction(
        date=entry.date or datetime.now(timezone.utc),
        description=entry.description,
        type=entry.type,
        category=entry.category,
        amount=round(entry.amount, 2),
        status=entry.status,
        reference_number=entry.reference_number,
        activity_id=entry.activity_id,
    )
    db.add(transaction)
    return transaction


def list_transactions(
    db: Session,
    type: Optional[TransactionType] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    reference_number: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Transaction]:
    query = db.query(Transaction)

    if type:
        query = query.filter(Transaction.type == type)
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)
    if reference_number:
        query = query.filter(Transaction.reference_number == reference_number)

    return query.order_by(Transaction.date.desc(), Transaction.id.desc()).offset(skip).limit(limit).all()


def financial_summary(db: Session) -> dict:
    """Revenus, dépenses (montant négatif) et bénéfice net des écritures complétées."""
    completed = Transaction.status == TransactionStatus.COMPLETED

    total_revenue = db.query(func.coalesce(func.sum(Transaction.amount), 0.0)).filter(
        Transaction.type == TransactionType.REVENUE, completed
    ).scalar()
    total_expenses = db.query(func.coalesce(func.sum(Transaction.amount), 0.0)).filter(
        Transaction.type == TransactionType.EXPENSE, completed
    ).scalar()
    transaction_count = db.query(func.count(Transaction.id)).scalar() or 0

    return {
        "total_revenue": round(total_revenue, 2),
        "total_expenses": round(total_expenses, 2),
        "net_profit": round(total_revenue + total_expenses, 2),
        "transaction_count": transaction_count,
    }
