from pydantic import BaseModel


class Token(BaseModel):
    """Réponse de token JWT."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # Secondes
