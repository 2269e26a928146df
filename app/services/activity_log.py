"""Journal d'activités : encaissements, suppressions, recherches et agrégats."""

import math
import uuid
from dataclasses import dataclass, field
from datetime import date as date_type, datetime, time, timedelta, timezone
from typing import List, Optional, Sequence

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    ActivityNotFound,
    LedgerError,
    LedgerValidationError,
    NothingToCancel,
    PersistenceFailure,
)
from app.core.logging import ledger_logger
from app.models.activity import Activity, PaymentType
from app.models.booking import BookingStatus
from app.models.transaction import Transaction, TransactionType
from app.services import collaborators, loyalty
from app.services.catalog import CategoryCatalog
from app.services.ledger import TransactionEntry, add_transaction

POINTS_CATEGORY = "Points de fidélité"


@dataclass
class CheckoutOutcome:
    checkout_ref: str
    activities: List[Activity]
    transactions: List[Transaction]
    points_debited: int = 0

    @property
    def count(self) -> int:
        return len(self.activities)

    @property
    def settled(self) -> bool:
        return all(a.is_settled for a in self.activities)


@dataclass
class _Line:
    item: object
    amount: float
    paid: float = 0.0
    duration: Optional[str] = field(default=None)


def compute_duration(start_time: Optional[str], end_time: Optional[str]) -> Optional[str]:
    """Durée lisible entre deux heures HH:MM ("2h", "1h30", "45 min").

    Retourne None si une heure est absente ou illisible, ou si la fin ne suit
    pas le début.
    """
    if not start_time or not end_time:
        return None
    try:
        start = datetime.strptime(start_time.strip(), "%H:%M")
        end = datetime.strptime(end_time.strip(), "%H:%M")
    except ValueError:
        return None

    minutes = int((end - start).total_seconds() // 60)
    if minutes <= 0:
        return None

    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{rest} min"
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h{rest:02d}"


def _line_amount(item, tolerance: float) -> float:
    expected = round(item.quantity * item.unit_price, 2)
    if item.amount is None:
        return expected
    if abs(item.amount - expected) > tolerance:
        raise LedgerValidationError(
            f"Montant incohérent pour '{item.description}' "
            f"({item.amount} au lieu de {item.quantity} x {item.unit_price} = {expected})"
        )
    return round(item.amount, 2)


def _allocate(paid_amount: float, lines: Sequence[_Line]) -> None:
    """Répartit l'acompte sur les articles, dans l'ordre, sans dépasser leur montant."""
    left = round(paid_amount, 2)
    for line in lines:
        line.paid = round(min(line.amount, left), 2)
        left = round(left - line.paid, 2)


def _new_checkout_ref(moment: datetime) -> str:
    return f"CHK-{moment.strftime('%Y%m%d')}-{uuid.uuid4().hex[:8].upper()}"


def create_activities(
    db: Session,
    client,
    items: Sequence,
    payment_type: PaymentType,
    paid_amount: Optional[float] = None,
    contract_id: Optional[int] = None,
    booking_id: Optional[int] = None,
) -> CheckoutOutcome:
    """
    Enregistre un encaissement : une activité par article, les écritures
    comptables associées et, pour un paiement en points, le débit du client.

    Tout est validé dans une seule transaction de base de données : en cas
    d'échec rien n'est conservé.

    Args:
        db: Session de base de données
        client: Identité du client (client_name, phone, client_id)
        items: Articles (description, category, quantity, unit_price, amount)
        payment_type: Direct, Échéancier ou Points
        paid_amount: Acompte versé (requis pour un échéancier)
        contract_id: Contrat lié, signalé payé quand l'encaissement est soldé
        booking_id: Réservation liée, passée à "Payé" quand l'encaissement est soldé

    Raises:
        LedgerValidationError, InsufficientPoints, UnknownCategory, ClientNotFound,
        PersistenceFailure
    """
    payment_type = PaymentType(payment_type)
    tolerance = settings.AMOUNT_TOLERANCE

    client_name = (client.client_name or "").strip()
    if not client_name:
        raise LedgerValidationError("Le nom du client est requis")
    if not items:
        raise LedgerValidationError("Au moins un article est requis")

    lines = []
    for item in items:
        if not (item.description or "").strip():
            raise LedgerValidationError("La description de l'article est requise")
        if item.quantity < 1:
            raise LedgerValidationError("La quantité doit être supérieure à 0")
        if not math.isfinite(item.unit_price) or item.unit_price < 0:
            raise LedgerValidationError("Le prix unitaire ne peut pas être négatif")
        if item.amount is not None and not math.isfinite(item.amount):
            raise LedgerValidationError(f"Montant invalide pour '{item.description}'")
        lines.append(_Line(
            item=item,
            amount=_line_amount(item, tolerance),
            duration=compute_duration(item.start_time, item.end_time),
        ))
    checkout_total = round(sum(line.amount for line in lines), 2)

    if payment_type == PaymentType.INSTALLMENT:
        if paid_amount is None:
            raise LedgerValidationError("L'acompte est requis pour un paiement échelonné")
        if not math.isfinite(paid_amount) or paid_amount < 0 or paid_amount > checkout_total + tolerance:
            raise LedgerValidationError(
                f"L'acompte ({paid_amount}) doit être compris entre 0 et le total ({checkout_total})"
            )
        _allocate(min(paid_amount, checkout_total), lines)
    else:
        for line in lines:
            line.paid = line.amount

    points_cost = 0
    if payment_type == PaymentType.POINTS:
        if client.client_id is None:
            raise LedgerValidationError("Un client enregistré est requis pour un paiement en points")
        points_cost = loyalty.checkout_point_cost(CategoryCatalog(db), items)

    moment = datetime.now(timezone.utc)
    checkout_ref = _new_checkout_ref(moment)
    phone = (client.phone or "").strip() or None

    try:
        if payment_type == PaymentType.POINTS:
            loyalty.debit(db, client.client_id, points_cost)

        activities = []
        for line in lines:
            item = line.item
            activity = Activity(
                client_name=client_name,
                phone=phone,
                client_id=client.client_id,
                description=item.description.strip(),
                category=item.category,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_amount=line.amount,
                paid_amount=line.paid,
                remaining_amount=round(line.amount - line.paid, 2),
                payment_type=payment_type,
                start_time=item.start_time,
                end_time=item.end_time,
                duration=line.duration,
                booking_id=booking_id,
                contract_id=contract_id,
                checkout_ref=checkout_ref,
                date=moment,
            )
            db.add(activity)
            activities.append(activity)
        db.flush()

        transactions = []
        if payment_type == PaymentType.POINTS:
            # La valeur cédée contre des points est une dépense
            transactions.append(add_transaction(db, TransactionEntry(
                date=moment,
                description=f"Paiement en points ({points_cost} pts) - {client_name}",
                type=TransactionType.EXPENSE,
                category=POINTS_CATEGORY,
                amount=-checkout_total,
                reference_number=checkout_ref,
                activity_id=activities[0].id if len(activities) == 1 else None,
            )))
        else:
            for activity in activities:
                if payment_type == PaymentType.INSTALLMENT and activity.paid_amount <= 0:
                    continue
                label = "Acompte" if payment_type == PaymentType.INSTALLMENT else "Vente"
                transactions.append(add_transaction(db, TransactionEntry(
                    date=moment,
                    description=f"{label} - {activity.description} ({client_name})",
                    type=TransactionType.REVENUE,
                    category=activity.category,
                    amount=activity.paid_amount,
                    reference_number=checkout_ref,
                    activity_id=activity.id,
                )))

        outcome = CheckoutOutcome(
            checkout_ref=checkout_ref,
            activities=activities,
            transactions=transactions,
            points_debited=points_cost,
        )

        if outcome.settled:
            if contract_id is not None:
                collaborators.on_contract_paid(db, contract_id)
            if booking_id is not None:
                collaborators.update_booking_status(db, booking_id, BookingStatus.PAID)

        db.commit()
    except LedgerError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        ledger_logger.error(
            f"Encaissement annulé ({checkout_ref}): {exc}",
            extra={"extra_data": {"checkout_ref": checkout_ref, "client_name": client_name}},
        )
        raise PersistenceFailure("L'encaissement n'a pas pu être enregistré. Aucune écriture n'a été conservée.") from exc

    for activity in activities:
        db.refresh(activity)
    for transaction in transactions:
        db.refresh(transaction)

    ledger_logger.info(
        f"Encaissement {checkout_ref}: {outcome.count} activité(s), {checkout_total} {settings.CURRENCY} ({payment_type.value})",
        extra={
            "extra_data": {
                "checkout_ref": checkout_ref,
                "client_name": client_name,
                "payment_type": payment_type.value,
                "total": checkout_total,
                "paid": round(sum(line.paid for line in lines), 2),
                "points": points_cost,
                "booking_id": booking_id,
                "contract_id": contract_id,
            }
        },
    )
    return outcome


def get_activity(db: Session, activity_id: int) -> Activity:
    activity = db.get(Activity, activity_id)
    if activity is None:
        raise ActivityNotFound(f"Activité {activity_id} non trouvée")
    return activity


def delete_activity(db: Session, activity_id: int) -> None:
    """
    Supprime définitivement une activité. Les écritures comptables sont
    conservées. Si c'était la dernière activité liée à une réservation, la
    réservation repasse "En attente".
    """
    activity = get_activity(db, activity_id)
    booking_id = activity.booking_id

    try:
        db.delete(activity)
        db.flush()

        if booking_id is not None:
            still_linked = db.query(func.count(Activity.id)).filter(
                Activity.booking_id == booking_id
            ).scalar()
            if not still_linked:
                collaborators.update_booking_status(db, booking_id, BookingStatus.PENDING)

        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceFailure("La suppression n'a pas pu être enregistrée.") from exc

    ledger_logger.info(
        f"Activité {activity_id} supprimée",
        extra={"extra_data": {"activity_id": activity_id, "booking_id": booking_id}},
    )


def cancel_booking_payment(db: Session, booking_id: int) -> int:
    """
    Annule le paiement d'une réservation : supprime toutes les activités qui
    la référencent puis la repasse "En attente".

    Returns:
        Nombre d'activités supprimées

    Raises:
        NothingToCancel: aucune activité ne référence la réservation
    """
    activities = db.query(Activity).filter(Activity.booking_id == booking_id).all()
    if not activities:
        raise NothingToCancel(booking_id)

    try:
        for activity in activities:
            db.delete(activity)
        collaborators.update_booking_status(db, booking_id, BookingStatus.PENDING)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceFailure("L'annulation n'a pas pu être enregistrée.") from exc

    ledger_logger.info(
        f"Paiement de la réservation {booking_id} annulé ({len(activities)} activité(s) supprimée(s))",
        extra={"extra_data": {"booking_id": booking_id, "deleted": len(activities)}},
    )
    return len(activities)


def list_activities(
    db: Session,
    search_term: Optional[str] = None,
    day: Optional[date_type] = None,
    client_name: Optional[str] = None,
    payment_type: Optional[PaymentType] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Activity]:
    """Activités les plus récentes d'abord, filtrées par texte et par jour calendaire."""
    query = db.query(Activity)

    if search_term:
        pattern = f"%{search_term.strip()}%"
        query = query.filter(or_(
            Activity.client_name.ilike(pattern),
            Activity.description.ilike(pattern),
        ))

    if day is not None:
        start = datetime.combine(day, time.min)
        query = query.filter(Activity.date >= start, Activity.date < start + timedelta(days=1))

    if client_name:
        query = query.filter(Activity.client_name.ilike(client_name.strip()))

    if payment_type:
        query = query.filter(Activity.payment_type == payment_type)

    return query.order_by(Activity.date.desc(), Activity.id.desc()).offset(skip).limit(limit).all()


def total_revenue(db: Session) -> float:
    """Total des ventes directes plus les sommes déjà versées sur les échéanciers."""
    direct = db.query(func.coalesce(func.sum(Activity.total_amount), 0.0)).filter(
        Activity.payment_type == PaymentType.DIRECT
    ).scalar()
    installments = db.query(func.coalesce(func.sum(Activity.paid_amount), 0.0)).filter(
        Activity.payment_type == PaymentType.INSTALLMENT
    ).scalar()
    return round(direct + installments, 2)


def outstanding_balance(db: Session) -> float:
    """Reste à encaisser sur les échéanciers ouverts."""
    remaining = db.query(func.coalesce(func.sum(Activity.remaining_amount), 0.0)).filter(
        Activity.payment_type == PaymentType.INSTALLMENT,
        Activity.remaining_amount > 0,
    ).scalar()
    return round(remaining, 2)


def activity_count(db: Session) -> int:
    return db.query(func.count(Activity.id)).scalar() or 0
