from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_current_active_user
from app.db.base import get_db
from app.models.transaction import TransactionType
from app.models.user import User
from app.schemas.transaction import FinancialSummary, Transaction as TransactionSchema
from app.services import ledger

router = APIRouter()


@router.get("/", response_model=List[TransactionSchema])
def read_transactions(
    type: Optional[TransactionType] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    reference_number: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Écritures du grand livre, les plus récentes d'abord."""
    return ledger.list_transactions(
        db,
        type=type,
        start_date=start_date,
        end_date=end_date,
        reference_number=reference_number,
        skip=skip,
        limit=limit,
    )


@router.get("/summary", response_model=FinancialSummary)
def read_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    return FinancialSummary(**ledger.financial_summary(db), currency=settings.CURRENCY)
