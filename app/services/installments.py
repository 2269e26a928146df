"""Règlement des échéanciers : versements successifs jusqu'au solde."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    ActivityNotFound,
    LedgerError,
    LedgerValidationError,
    OverPayment,
    PersistenceFailure,
)
from app.core.logging import ledger_logger
from app.models.activity import Activity, PaymentType
from app.models.booking import BookingStatus
from app.models.transaction import Transaction, TransactionType
from app.services import collaborators
from app.services.ledger import TransactionEntry, add_transaction


@dataclass
class InstallmentOutcome:
    activity: Activity
    transaction: Transaction
    settled: bool


def record_installment(db: Session, activity_id: int, amount: float) -> InstallmentOutcome:
    """
    Enregistre un versement sur une activité en échéancier.

    La ligne est verrouillée pendant la vérification, deux versements
    concurrents ne peuvent donc pas dépasser le reste dû. Une activité soldée
    refuse tout nouveau versement (OverPayment).

    Raises:
        LedgerValidationError: montant non positif ou activité hors échéancier
        ActivityNotFound: activité inexistante
        OverPayment: le versement dépasse le reste dû
    """
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise LedgerValidationError("Le montant du versement doit être positif")
    amount = round(amount, 2)

    try:
        activity = db.query(Activity).filter(Activity.id == activity_id).with_for_update().first()
        if activity is None:
            raise ActivityNotFound(f"Activité {activity_id} non trouvée")
        if activity.payment_type != PaymentType.INSTALLMENT:
            raise LedgerValidationError("Seules les activités en échéancier acceptent des versements")

        new_paid = round(activity.paid_amount + amount, 2)
        new_remaining = round(activity.total_amount - new_paid, 2)
        if new_remaining < 0:
            raise OverPayment(amount=amount, remaining=activity.remaining_amount)

        activity.paid_amount = new_paid
        activity.remaining_amount = new_remaining
        settled = new_remaining == 0

        transaction = add_transaction(db, TransactionEntry(
            date=datetime.now(timezone.utc),
            description=f"Versement échéancier - {activity.description} ({activity.client_name})",
            type=TransactionType.REVENUE,
            category=activity.category,
            amount=amount,
            reference_number=activity.checkout_ref,
            activity_id=activity.id,
        ))

        if settled:
            if activity.contract_id is not None:
                collaborators.on_contract_paid(db, activity.contract_id)
            if activity.booking_id is not None:
                collaborators.update_booking_status(db, activity.booking_id, BookingStatus.PAID)

        db.commit()
    except LedgerError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceFailure("Le versement n'a pas pu être enregistré.") from exc

    db.refresh(activity)
    db.refresh(transaction)

    ledger_logger.info(
        f"Versement de {amount} {settings.CURRENCY} sur l'activité {activity_id}"
        + (" (soldée)" if settled else f" (reste {new_remaining})"),
        extra={
            "extra_data": {
                "activity_id": activity_id,
                "amount": amount,
                "paid_amount": new_paid,
                "remaining_amount": new_remaining,
                "settled": settled,
            }
        },
    )
    return InstallmentOutcome(activity=activity, transaction=transaction, settled=settled)


def list_installment_plans(db: Session, open_only: bool = True) -> List[Activity]:
    """Activités en échéancier, les plus endettées d'abord."""
    query = db.query(Activity).filter(Activity.payment_type == PaymentType.INSTALLMENT)
    if open_only:
        query = query.filter(Activity.remaining_amount > 0)
    return query.order_by(Activity.remaining_amount.desc(), Activity.date.desc()).all()
