"""Points de fidélité : coût d'un achat en points, débit atomique, paliers."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    ClientNotFound,
    InsufficientPoints,
    LedgerValidationError,
    UnknownCategory,
)
from app.core.logging import ledger_logger
from app.db.events import record_bulk_update
from app.models.activity import Activity, PaymentType
from app.models.client import Client
from app.services.catalog import CategoryCatalog

logger = logging.getLogger(__name__)

# (seuil de dépenses exclusif, palier, FCFA par point gagné), du plus haut au plus bas
LOYALTY_TIERS = (
    (500_000, "Diamant", 100),
    (250_000, "Platine", 150),
    (100_000, "Or", 200),
    (50_000, "Argent", 250),
    (0, "Bronze", 300),
)


def _tier_for(total_spent: float):
    for threshold, tier, rate in LOYALTY_TIERS:
        if total_spent > threshold:
            return tier, rate
    return LOYALTY_TIERS[-1][1], LOYALTY_TIERS[-1][2]


def loyalty_tier(total_spent: float) -> str:
    return _tier_for(total_spent)[0]


def earned_points(total_spent: float) -> int:
    """Points acquis pour un montant dépensé, au taux du palier atteint."""
    if total_spent <= 0:
        return 0
    return int(total_spent // _tier_for(total_spent)[1])


def checkout_point_cost(catalog: CategoryCatalog, items: Iterable, strict: Optional[bool] = None) -> int:
    """Somme de point_cost * quantité sur les articles d'un même encaissement.

    Une catégorie inconnue coûte 0 point, sauf en mode strict où elle est
    refusée (UnknownCategory).
    """
    if strict is None:
        strict = settings.POINTS_REQUIRE_KNOWN_CATEGORY

    total = 0
    for item in items:
        category = catalog.find(item.category)
        if category is None:
            if strict:
                raise UnknownCategory(item.category)
            logger.warning("Unknown category '%s' priced at 0 points", item.category)
            continue
        total += category.point_cost * item.quantity
    return total


def debit(db: Session, client_id: int, points: int) -> int:
    """Débite des points en une seule requête conditionnelle. Pas de commit.

    Le solde n'est décrémenté que s'il couvre le débit, ce qui exclut tout
    découvert même avec deux achats simultanés.

    Returns:
        Nombre de points débités
    """
    if points < 0:
        raise LedgerValidationError("Le nombre de points à débiter ne peut pas être négatif")

    updated = db.query(Client).filter(
        Client.id == client_id,
        Client.loyalty_points >= points,
    ).update(
        {Client.loyalty_points: Client.loyalty_points - points},
        synchronize_session="fetch",
    )

    if updated == 0:
        client = db.get(Client, client_id)
        if client is None:
            raise ClientNotFound(f"Client {client_id} non trouvé")
        raise InsufficientPoints(required=points, available=client.loyalty_points)
    record_bulk_update(db, Client.__tablename__, [client_id])

    ledger_logger.info(
        f"Points débités: {points} (client {client_id})",
        extra={"extra_data": {"client_id": client_id, "points": points}},
    )
    return points


def credit(db: Session, client_id: int, points: int) -> None:
    """Crédite des points. Pas de commit."""
    if points < 0:
        raise LedgerValidationError("Le nombre de points à créditer ne peut pas être négatif")

    updated = db.query(Client).filter(Client.id == client_id).update(
        {Client.loyalty_points: Client.loyalty_points + points},
        synchronize_session="fetch",
    )
    if updated == 0:
        raise ClientNotFound(f"Client {client_id} non trouvé")
    record_bulk_update(db, Client.__tablename__, [client_id])

    ledger_logger.info(
        f"Points crédités: {points} (client {client_id})",
        extra={"extra_data": {"client_id": client_id, "points": points}},
    )


def adjust_points(db: Session, client_id: int, points: int, reason: Optional[str] = None) -> Client:
    """Ajustement manuel du solde (positif = crédit, négatif = débit), validé immédiatement."""
    try:
        if points >= 0:
            credit(db, client_id, points)
        else:
            debit(db, client_id, -points)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Ajustement de points pour le client {client_id}: {points:+d} ({reason or 'sans motif'})")
    client = db.get(Client, client_id)
    db.refresh(client)
    return client


@dataclass
class ClientSummary:
    name: str
    phone: Optional[str]
    first_seen: datetime
    last_seen: datetime
    total_spent: float = 0.0
    activity_count: int = 0
    loyalty_tier: str = "Bronze"
    earned_points: int = 0


def _spent(activity: Activity) -> float:
    if activity.payment_type == PaymentType.DIRECT:
        return activity.total_amount
    if activity.payment_type == PaymentType.INSTALLMENT:
        return activity.paid_amount or 0.0
    return 0.0


def client_summaries(db: Session, search: Optional[str] = None) -> List[ClientSummary]:
    """Clients reconstitués depuis le journal, regroupés par téléphone (ou nom à défaut).

    Les achats en points ne comptent pas dans les dépenses.
    """
    summaries = {}
    for activity in db.query(Activity).order_by(Activity.date, Activity.id).all():
        key = activity.phone or activity.client_name
        if not key:
            continue

        summary = summaries.get(key)
        if summary is None:
            summary = ClientSummary(
                name=activity.client_name,
                phone=activity.phone,
                first_seen=activity.date,
                last_seen=activity.date,
            )
            summaries[key] = summary

        summary.total_spent += _spent(activity)
        summary.activity_count += 1
        if activity.date > summary.last_seen:
            summary.last_seen = activity.date

    result = []
    for summary in summaries.values():
        if search and search.lower() not in summary.name.lower() and search not in (summary.phone or ""):
            continue
        summary.total_spent = round(summary.total_spent, 2)
        summary.loyalty_tier = loyalty_tier(summary.total_spent)
        summary.earned_points = earned_points(summary.total_spent)
        result.append(summary)

    return sorted(result, key=lambda s: s.last_seen, reverse=True)
