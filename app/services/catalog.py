"""Catalogue des catégories d'activités (tarifs et coûts en points)."""

import io
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd
from sqlalchemy.orm import Session

from app.core.exceptions import LedgerValidationError
from app.models.category import ActivityCategory

logger = logging.getLogger(__name__)

DEFAULT_ICON = "dollar"
DEFAULT_COLOR = "gray"

ICONS = ("book", "gamepad", "mic", "dollar", "ticket", "shirt")

COLOR_CLASSES = {
    "blue": "bg-blue-500/20 text-blue-700 border-blue-500/30",
    "red": "bg-red-500/20 text-red-700 border-red-500/30",
    "purple": "bg-purple-500/20 text-purple-700 border-purple-500/30",
    "gray": "bg-gray-500/20 text-gray-700 border-gray-500/30",
    "green": "bg-green-500/20 text-green-700 border-green-500/30",
    "orange": "bg-orange-500/20 text-orange-700 border-orange-500/30",
}

# Colonnes acceptées à l'import -> champ
IMPORT_COLUMNS = {
    "nom": "name",
    "name": "name",
    "description": "description",
    "cout_points": "point_cost",
    "points": "point_cost",
    "point_cost": "point_cost",
    "prix_unitaire": "unit_price",
    "prix": "unit_price",
    "unit_price": "unit_price",
    "icone": "icon",
    "icon": "icon",
    "couleur": "color",
    "color": "color",
}


@dataclass(frozen=True)
class CategoryRendering:
    icon: str
    color: str
    css_classes: str


def rendering(category: Optional[ActivityCategory]) -> CategoryRendering:
    """Icône et couleur d'affichage, avec repli sur les valeurs par défaut."""
    icon = category.icon if category is not None and category.icon in ICONS else DEFAULT_ICON
    color = category.color if category is not None and category.color in COLOR_CLASSES else DEFAULT_COLOR
    return CategoryRendering(icon=icon, color=color, css_classes=COLOR_CLASSES[color])


class CategoryCatalog:
    """Lecture du catalogue, chargé une fois par instance.

    Une catégorie introuvable donne None : pas de tarif spécifique, coût en
    points nul, icône et couleur par défaut.
    """

    def __init__(self, db: Session):
        self.db = db
        self._by_name: Optional[Dict[str, ActivityCategory]] = None

    def _load(self) -> Dict[str, ActivityCategory]:
        if self._by_name is None:
            self._by_name = {c.name: c for c in list_categories(self.db)}
        return self._by_name

    def find(self, name: Optional[str]) -> Optional[ActivityCategory]:
        if not name:
            return None
        return self._load().get(name.strip())

    def point_cost(self, name: Optional[str]) -> int:
        category = self.find(name)
        return category.point_cost if category is not None else 0


def list_categories(db: Session, include_inactive: bool = False) -> List[ActivityCategory]:
    query = db.query(ActivityCategory)
    if not include_inactive:
        query = query.filter(ActivityCategory.is_active == True)  # noqa: E712
    return query.order_by(ActivityCategory.name).all()


def _clean_display(icon: Optional[str], color: Optional[str]) -> dict:
    values = {}
    if icon is not None:
        values["icon"] = icon if icon in ICONS else DEFAULT_ICON
    if color is not None:
        values["color"] = color if color in COLOR_CLASSES else DEFAULT_COLOR
    return values


def _check_pricing(fields: dict) -> None:
    point_cost = fields.get("point_cost")
    unit_price = fields.get("unit_price")
    if point_cost is not None and point_cost < 0:
        raise LedgerValidationError("Le coût en points ne peut pas être négatif")
    if unit_price is not None and not (math.isfinite(unit_price) and unit_price >= 0):
        raise LedgerValidationError("Le prix unitaire doit être un nombre positif ou nul")


def create_category(db: Session, **fields) -> ActivityCategory:
    name = (fields.pop("name", None) or "").strip()
    if not name:
        raise LedgerValidationError("Le nom de la catégorie est requis")

    if db.query(ActivityCategory).filter(ActivityCategory.name == name).first():
        raise LedgerValidationError(f"La catégorie '{name}' existe déjà")
    _check_pricing(fields)

    fields.update(_clean_display(fields.pop("icon", DEFAULT_ICON), fields.pop("color", DEFAULT_COLOR)))
    category = ActivityCategory(name=name, **fields)
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"Catégorie créée: {name}")
    return category


def update_category(db: Session, category_id: int, **fields) -> Optional[ActivityCategory]:
    category = db.get(ActivityCategory, category_id)
    if category is None:
        return None

    _check_pricing(fields)
    fields.update(_clean_display(fields.pop("icon", None), fields.pop("color", None)))
    for key, value in fields.items():
        setattr(category, key, value)

    db.commit()
    db.refresh(category)
    return category


def import_categories(db: Session, filename: str, contents: bytes) -> dict:
    """
    Importe ou met à jour des catégories depuis un fichier CSV ou Excel.

    Colonnes (seul le nom est requis) :
    - nom / name
    - description
    - cout_points / point_cost (défaut: 0)
    - prix_unitaire / unit_price (défaut: 0)
    - icone / icon, couleur / color

    Une catégorie existante (même nom) est mise à jour.
    """
    extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    if extension not in ('csv', 'xlsx', 'xls'):
        raise LedgerValidationError("Format de fichier non supporté. Utilisez .xlsx, .xls ou .csv")

    try:
        if extension == 'csv':
            df = pd.read_csv(io.BytesIO(contents), encoding='utf-8')
        else:
            df = pd.read_excel(io.BytesIO(contents))
    except pd.errors.EmptyDataError:
        raise LedgerValidationError("Le fichier est vide")

    df.columns = (
        df.columns.str.lower().str.strip().str.replace(' ', '_')
        .str.replace('é', 'e').str.replace('è', 'e').str.replace('ô', 'o')
    )
    df = df.rename(columns={k: v for k, v in IMPORT_COLUMNS.items() if k in df.columns})

    if 'name' not in df.columns:
        raise LedgerValidationError("Colonne 'nom' ou 'name' requise")

    existing = {c.name: c for c in list_categories(db, include_inactive=True)}
    created_count = 0
    updated_count = 0
    errors = []

    for idx, row in df.iterrows():
        name = str(row['name']).strip() if pd.notna(row['name']) else ''
        if not name:
            continue

        try:
            values = {
                "point_cost": int(row['point_cost']) if 'point_cost' in row and pd.notna(row['point_cost']) else 0,
                "unit_price": float(row['unit_price']) if 'unit_price' in row and pd.notna(row['unit_price']) else 0.0,
            }
        except (TypeError, ValueError) as e:
            errors.append(f"Ligne {idx + 2}: {e}")
            continue

        if values["point_cost"] < 0 or values["unit_price"] < 0:
            errors.append(f"Ligne {idx + 2}: valeurs négatives refusées")
            continue

        if 'description' in row and pd.notna(row['description']):
            values["description"] = str(row['description']).strip()
        values.update(_clean_display(
            str(row['icon']).strip().lower() if 'icon' in row and pd.notna(row['icon']) else None,
            str(row['color']).strip().lower() if 'color' in row and pd.notna(row['color']) else None,
        ))

        category = existing.get(name)
        if category is None:
            category = ActivityCategory(name=name, **values)
            db.add(category)
            existing[name] = category
            created_count += 1
        else:
            for key, value in values.items():
                setattr(category, key, value)
            updated_count += 1

    db.commit()
    logger.info(f"Import catégories: {created_count} créée(s), {updated_count} mise(s) à jour, {len(errors)} erreur(s)")

    return {
        "created": created_count,
        "updated": updated_count,
        "errors": len(errors),
        "error_details": errors[:10],
        "message": f"{created_count + updated_count} catégorie(s) importée(s) avec succès",
    }
