from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_active_user, get_current_manager
from app.db.base import get_db
from app.models.client import Client
from app.models.user import User
from app.schemas.client import (
    Client as ClientSchema,
    ClientCreate,
    ClientSummary,
    ClientUpdate,
    PointsAdjustment,
)
from app.services import collaborators, loyalty

router = APIRouter()


@router.get("/", response_model=List[ClientSchema])
def read_clients(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Liste les clients enregistrés."""
    query = db.query(Client)

    if search:
        query = query.filter(
            (Client.name.ilike(f"%{search}%")) |
            (Client.phone.ilike(f"%{search}%")) |
            (Client.email.ilike(f"%{search}%"))
        )

    return query.order_by(Client.name).offset(skip).limit(limit).all()


@router.get("/summary", response_model=List[ClientSummary])
def read_client_summaries(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Clients vus dans le journal : dépenses, palier de fidélité, points acquis."""
    return [ClientSummary.model_validate(s) for s in loyalty.client_summaries(db, search=search)]


@router.post("/", response_model=ClientSchema, status_code=status.HTTP_201_CREATED)
def create_client(
    *,
    db: Session = Depends(get_db),
    client_in: ClientCreate,
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Créer un client."""
    client = Client(**client_in.model_dump())
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


@router.get("/{client_id}", response_model=ClientSchema)
def read_client(
    *,
    db: Session = Depends(get_db),
    client_id: int,
    current_user: User = Depends(get_current_active_user),
) -> Any:
    client = db.get(Client, client_id)
    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client non trouvé"
        )
    return client


@router.put("/{client_id}", response_model=ClientSchema)
def update_client(
    *,
    db: Session = Depends(get_db),
    client_id: int,
    client_in: ClientUpdate,
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Mettre à jour un client. Le solde de points passe par /points."""
    client = collaborators.update_client(db, client_id, **client_in.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(client)
    return client


@router.post("/{client_id}/points", response_model=ClientSchema)
def adjust_points(
    *,
    db: Session = Depends(get_db),
    client_id: int,
    adjustment: PointsAdjustment,
    current_user: User = Depends(get_current_manager),
) -> Any:
    """Crédit (positif) ou débit (négatif) manuel de points de fidélité."""
    return loyalty.adjust_points(db, client_id, adjustment.points, adjustment.reason)
