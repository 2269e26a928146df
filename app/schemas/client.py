from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator


class ClientBase(BaseModel):
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None


class ClientCreate(ClientBase):
    loyalty_points: int = 0

    @field_validator("loyalty_points")
    @classmethod
    def validate_points(cls, v):
        if v < 0:
            raise ValueError("Le solde de points ne peut pas être négatif")
        return v


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None


class Client(ClientBase):
    id: int
    loyalty_points: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PointsAdjustment(BaseModel):
    """Crédit (positif) ou débit (négatif) manuel de points."""
    points: int
    reason: Optional[str] = None

    @field_validator("points")
    @classmethod
    def validate_points(cls, v):
        if v == 0:
            raise ValueError("Le nombre de points ne peut pas être nul")
        return v


class ClientSummary(BaseModel):
    """Client reconstitué à partir du journal d'activités."""
    name: str
    phone: Optional[str] = None
    first_seen: datetime
    last_seen: datetime
    total_spent: float
    activity_count: int
    loyalty_tier: str
    earned_points: int

    class Config:
        from_attributes = True
