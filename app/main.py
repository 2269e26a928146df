from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.logging import setup_logging
from app.core.middleware import HTTPLoggingMiddleware
from app.core.exceptions import (
    LedgerError,
    ledger_exception_handler,
    validation_exception_handler,
    sqlalchemy_exception_handler,
    general_exception_handler,
)
from app.api.v1 import api_router
from app.db.base import Base, engine
from app import models  # noqa: F401

# Configurer le logging
setup_logging(environment=settings.ENVIRONMENT, log_dir=settings.LOG_DIR)

# Créer les tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Middlewares
# 1. Logging HTTP (en premier pour capturer toutes les requêtes)
app.add_middleware(HTTPLoggingMiddleware)


# 2. Protocole réel derrière un proxy HTTPS
@app.middleware("http")
async def forwarded_proto_middleware(request: Request, call_next):
    """Respecte l'en-tête x-forwarded-proto posé par le proxy."""
    if request.headers.get("x-forwarded-proto") == "https":
        request.scope["scheme"] = "https"
    return await call_next(request)

# 3. CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Handlers d'exceptions
app.add_exception_handler(LedgerError, ledger_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Inclure les routes
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Point d'entrée de l'API."""
    return {
        "message": "KHEOPS Ledger API",
        "version": settings.PROJECT_VERSION,
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """Vérification de santé de l'API."""
    return {"status": "healthy"}
