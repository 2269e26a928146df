from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from app.models.user import UserRole


class UserLogin(BaseModel):
    username: str
    password: str


class User(BaseModel):
    id: int
    email: str
    username: str
    full_name: Optional[str] = None
    role: UserRole
    is_active: bool
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True
