from typing import List
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Application
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "KHEOPS Ledger"
    PROJECT_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_DIR: str = "logs"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:9002"]

    # Ledger
    CURRENCY: str = "FCFA"
    AMOUNT_TOLERANCE: float = 0.01  # Tolérance pour les arrondis
    POINTS_REQUIRE_KNOWN_CATEGORY: bool = True  # Refuser un achat en points sur une catégorie inconnue

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @field_validator("AMOUNT_TOLERANCE")
    @classmethod
    def validate_tolerance(cls, v):
        if v < 0:
            raise ValueError("La tolérance ne peut pas être négative")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
