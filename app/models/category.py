from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, Text, CheckConstraint
from sqlalchemy.sql import func
from app.db.base import Base


class ActivityCategory(Base):
    """Catégorie d'activité : tarif par défaut et coût en points."""
    __tablename__ = "activity_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Tarification
    point_cost = Column(Integer, default=0, nullable=False)  # Points requis par unité
    unit_price = Column(Float, default=0.0, nullable=False)  # Prix unitaire par défaut

    # Affichage
    icon = Column(String, default="dollar", nullable=False)
    color = Column(String, default="gray", nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("point_cost >= 0", name="ck_activity_categories_point_cost_positive"),
        CheckConstraint("unit_price >= 0", name="ck_activity_categories_unit_price_positive"),
    )
