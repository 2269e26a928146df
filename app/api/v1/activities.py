"""
Routes du journal d'activités : encaissements, échéanciers, annulations.
"""

from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_current_active_user, get_current_manager
from app.db.base import get_db
from app.models.activity import PaymentType
from app.models.user import User
from app.schemas.activity import (
    Activity as ActivitySchema,
    CancelPaymentResult,
    CheckoutRequest,
    CheckoutResult,
    InstallmentRequest,
    InstallmentResult,
    RevenueSummary,
)
from app.services import activity_log, installments

router = APIRouter()


@router.get("/", response_model=List[ActivitySchema])
def read_activities(
    search: Optional[str] = None,
    day: Optional[date] = Query(None, description="Jour calendaire (YYYY-MM-DD)"),
    client_name: Optional[str] = None,
    payment_type: Optional[PaymentType] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Liste les activités, les plus récentes d'abord."""
    return activity_log.list_activities(
        db,
        search_term=search,
        day=day,
        client_name=client_name,
        payment_type=payment_type,
        skip=skip,
        limit=limit,
    )


@router.post("/checkout", response_model=CheckoutResult, status_code=status.HTTP_201_CREATED)
def checkout(
    *,
    db: Session = Depends(get_db),
    checkout_in: CheckoutRequest,
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Encaisse un panier : une activité par article.

    - **payment_type**: Direct, Échéancier (avec **paid_amount**) ou Points (avec **client_id**)
    - **booking_id** / **contract_id**: mis à jour quand l'encaissement est soldé
    """
    outcome = activity_log.create_activities(
        db,
        client=checkout_in,
        items=checkout_in.items,
        payment_type=checkout_in.payment_type,
        paid_amount=checkout_in.paid_amount,
        contract_id=checkout_in.contract_id,
        booking_id=checkout_in.booking_id,
    )
    return CheckoutResult.model_validate(outcome)


@router.get("/installments", response_model=List[ActivitySchema])
def read_installment_plans(
    open_only: bool = True,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Échéanciers (par défaut ceux qui restent à solder)."""
    return installments.list_installment_plans(db, open_only=open_only)


@router.get("/revenue", response_model=RevenueSummary)
def read_revenue(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    return RevenueSummary(
        total_revenue=activity_log.total_revenue(db),
        outstanding_balance=activity_log.outstanding_balance(db),
        activity_count=activity_log.activity_count(db),
        currency=settings.CURRENCY,
    )


@router.post("/bookings/{booking_id}/cancel-payment", response_model=CancelPaymentResult)
def cancel_booking_payment(
    *,
    db: Session = Depends(get_db),
    booking_id: int,
    current_user: User = Depends(get_current_manager),
) -> Any:
    """Supprime les activités d'une réservation et la repasse en attente."""
    deleted = activity_log.cancel_booking_payment(db, booking_id)
    return CancelPaymentResult(booking_id=booking_id, deleted_count=deleted)


@router.get("/{activity_id}", response_model=ActivitySchema)
def read_activity(
    *,
    db: Session = Depends(get_db),
    activity_id: int,
    current_user: User = Depends(get_current_active_user),
) -> Any:
    return activity_log.get_activity(db, activity_id)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(
    *,
    db: Session = Depends(get_db),
    activity_id: int,
    current_user: User = Depends(get_current_manager),
) -> Response:
    """Supprime une activité. Les écritures comptables sont conservées."""
    activity_log.delete_activity(db, activity_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{activity_id}/installments", response_model=InstallmentResult)
def record_installment(
    *,
    db: Session = Depends(get_db),
    activity_id: int,
    installment_in: InstallmentRequest,
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Enregistre un versement sur un échéancier."""
    outcome = installments.record_installment(db, activity_id, installment_in.amount)
    return InstallmentResult.model_validate(outcome)
