"""
Écritures du journal vers les modules voisins : réservations, contrats, clients.

Les références sont faibles : une réservation ou un contrat introuvable est
journalisé puis ignoré. Aucune fonction ne fait de commit.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ClientNotFound
from app.models.booking import Booking, BookingStatus
from app.models.client import Client
from app.models.contract import Contract, ContractPaymentStatus

logger = logging.getLogger(__name__)


def update_booking_status(db: Session, booking_id: int, status: BookingStatus) -> Optional[Booking]:
    booking = db.get(Booking, booking_id)
    if booking is None:
        logger.warning("Booking %s not found, status %s not applied", booking_id, status.value)
        return None

    booking.status = status
    logger.info("Booking %s -> %s", booking_id, status.value)
    return booking


def on_contract_paid(db: Session, contract_id: int) -> bool:
    """Marque un contrat comme payé. Retourne False si rien n'a changé.

    Un contrat déjà payé n'est pas modifié : le signal n'a d'effet qu'une fois.
    """
    contract = db.get(Contract, contract_id)
    if contract is None:
        logger.warning("Contract %s not found, payment signal ignored", contract_id)
        return False

    if contract.payment_status == ContractPaymentStatus.PAID:
        logger.info("Contract %s already paid", contract_id)
        return False

    contract.payment_status = ContractPaymentStatus.PAID
    contract.paid_at = datetime.now(timezone.utc)
    logger.info("Contract %s marked as paid", contract_id)
    return True


def update_client(db: Session, client_id: int, **fields) -> Client:
    client = db.get(Client, client_id)
    if client is None:
        raise ClientNotFound(f"Client {client_id} non trouvé")

    for key, value in fields.items():
        setattr(client, key, value)
    return client
