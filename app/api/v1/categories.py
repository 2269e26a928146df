from typing import Any, List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_active_user, get_current_manager
from app.db.base import get_db
from app.models.user import User
from app.schemas.category import (
    ActivityCategory as ActivityCategorySchema,
    ActivityCategoryCreate,
    ActivityCategoryUpdate,
    CategoryImportResult,
)
from app.services import catalog

router = APIRouter()


@router.get("/", response_model=List[ActivityCategorySchema])
def read_categories(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Liste les catégories d'activités."""
    return catalog.list_categories(db, include_inactive=include_inactive)


@router.post("/", response_model=ActivityCategorySchema, status_code=status.HTTP_201_CREATED)
def create_category(
    *,
    db: Session = Depends(get_db),
    category_in: ActivityCategoryCreate,
    current_user: User = Depends(get_current_manager),
) -> Any:
    """Créer une catégorie."""
    return catalog.create_category(db, **category_in.model_dump())


@router.put("/{category_id}", response_model=ActivityCategorySchema)
def update_category(
    *,
    db: Session = Depends(get_db),
    category_id: int,
    category_in: ActivityCategoryUpdate,
    current_user: User = Depends(get_current_manager),
) -> Any:
    """Mettre à jour une catégorie."""
    category = catalog.update_category(db, category_id, **category_in.model_dump(exclude_unset=True))
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Catégorie non trouvée"
        )
    return category


@router.post("/import", response_model=CategoryImportResult, summary="Importer des catégories depuis Excel/CSV")
def import_categories(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
) -> Any:
    """
    Importer des catégories depuis un fichier Excel (.xlsx, .xls) ou CSV.

    Colonnes : nom (requis), description, cout_points, prix_unitaire, icone, couleur.
    """
    contents = file.file.read()
    return catalog.import_categories(db, file.filename or "", contents)
