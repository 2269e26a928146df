from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class ActivityCategoryBase(BaseModel):
    name: str
    description: Optional[str] = None
    point_cost: int = 0
    unit_price: float = Field(0.0, allow_inf_nan=False)
    icon: str = "dollar"
    color: str = "gray"

    @field_validator("point_cost")
    @classmethod
    def validate_point_cost(cls, v):
        if v < 0:
            raise ValueError("Le coût en points ne peut pas être négatif")
        return v

    @field_validator("unit_price")
    @classmethod
    def validate_unit_price(cls, v):
        if v < 0:
            raise ValueError("Le prix unitaire ne peut pas être négatif")
        return v


class ActivityCategoryCreate(ActivityCategoryBase):
    pass


class ActivityCategoryUpdate(BaseModel):
    description: Optional[str] = None
    point_cost: Optional[int] = None
    unit_price: Optional[float] = Field(None, allow_inf_nan=False)
    icon: Optional[str] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("point_cost")
    @classmethod
    def validate_point_cost(cls, v):
        if v is not None and v < 0:
            raise ValueError("Le coût en points ne peut pas être négatif")
        return v

    @field_validator("unit_price")
    @classmethod
    def validate_unit_price(cls, v):
        if v is not None and v < 0:
            raise ValueError("Le prix unitaire ne peut pas être négatif")
        return v


class ActivityCategory(ActivityCategoryBase):
    id: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class CategoryImportResult(BaseModel):
    created: int
    updated: int
    errors: int
    error_details: List[str] = []
    message: str
