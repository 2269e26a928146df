"""
Routes d'authentification du personnel - connexion et profil.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import create_access_token, verify_password
from app.core.deps import get_current_active_user
from app.db.base import get_db
from app.models.user import User
from app.schemas.token import Token
from app.schemas.user import User as UserSchema, UserLogin

router = APIRouter()


@router.post(
    "/login",
    response_model=Token,
    summary="Connexion du personnel",
)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
) -> Any:
    """
    Authentifie un membre du personnel et retourne un token JWT.

    Le champ username accepte aussi l'email.
    """
    user = db.query(User).filter(
        (User.username == credentials.username) | (User.email == credentials.username)
    ).first()

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Utilisateur ou mot de passe incorrect",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Votre compte a été désactivé",
        )

    user.last_login = datetime.now(timezone.utc)
    db.commit()

    return Token(
        access_token=create_access_token(subject=user.id, role=user.role.value),
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.get(
    "/me",
    response_model=UserSchema,
    summary="Profil de l'utilisateur connecté",
)
def read_users_me(
    current_user: User = Depends(get_current_active_user),
) -> Any:
    return current_user
