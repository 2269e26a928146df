from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_active_user
from app.db.base import get_db
from app.models.contract import Contract
from app.models.user import User
from app.schemas.contract import Contract as ContractSchema, ContractCreate

router = APIRouter()


@router.get("/", response_model=List[ContractSchema])
def read_contracts(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    return db.query(Contract).order_by(Contract.id.desc()).offset(skip).limit(limit).all()


@router.post("/", response_model=ContractSchema, status_code=status.HTTP_201_CREATED)
def create_contract(
    *,
    db: Session = Depends(get_db),
    contract_in: ContractCreate,
    current_user: User = Depends(get_current_active_user),
) -> Any:
    contract = Contract(**contract_in.model_dump())
    db.add(contract)
    db.commit()
    db.refresh(contract)
    return contract


@router.get("/{contract_id}", response_model=ContractSchema)
def read_contract(
    *,
    db: Session = Depends(get_db),
    contract_id: int,
    current_user: User = Depends(get_current_active_user),
) -> Any:
    contract = db.get(Contract, contract_id)
    if not contract:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contrat non trouvé"
        )
    return contract
