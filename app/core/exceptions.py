"""
Exceptions métier du journal d'activités et gestionnaires d'exceptions FastAPI.
"""

import json
import logging
import math
from typing import Any, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError, IntegrityError

from app.core.logging import db_logger, ledger_logger

logger = logging.getLogger(__name__)


# ============================================================
# Exceptions métier
# ============================================================

class LedgerError(Exception):
    """Erreur métier du journal. Rejetée avant toute écriture, sauf PersistenceFailure."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Opération refusée"

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


class LedgerValidationError(LedgerError):
    """Entrée invalide (nom du client manquant, montant non positif, etc.)."""
    default_message = "Données invalides"


class InsufficientPoints(LedgerError):
    default_message = "Points de fidélité insuffisants"

    def __init__(self, required: int, available: int, message: Optional[str] = None):
        self.required = required
        self.available = available
        super().__init__(
            message or f"Points de fidélité insuffisants (requis: {required}, disponibles: {available})",
            required=required,
            available=available,
        )


class OverPayment(LedgerError):
    default_message = "Le montant dépasse le reste à payer"

    def __init__(self, amount: float, remaining: float):
        self.amount = amount
        self.remaining = remaining
        super().__init__(
            f"Le montant du versement ({amount}) dépasse le reste à payer ({remaining})",
            amount=amount,
            remaining=remaining,
        )


class UnknownCategory(LedgerError):
    default_message = "Catégorie inconnue"

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Catégorie inconnue : '{category}'", category=category)


class NothingToCancel(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Aucun paiement à annuler"

    def __init__(self, booking_id: int):
        self.booking_id = booking_id
        super().__init__(
            f"Aucune activité liée à la réservation {booking_id}",
            booking_id=booking_id,
        )


class ActivityNotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Activité non trouvée"


class ClientNotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Client non trouvé"


class PersistenceFailure(LedgerError):
    """Écriture en base impossible. La transaction a été annulée, sans nouvelle tentative."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Erreur d'enregistrement. Veuillez réessayer plus tard."


# ============================================================
# Gestionnaires d'exceptions
# ============================================================

def make_json_serializable(obj: Any) -> Any:
    """
    Convertit les objets non-sérialisables en JSON (bytes, NaN, etc.) en strings.
    """
    if isinstance(obj, bytes):
        try:
            return obj.decode('utf-8')
        except UnicodeDecodeError:
            return str(obj)
    elif isinstance(obj, dict):
        return {k: make_json_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_json_serializable(item) for item in obj]
    elif isinstance(obj, Exception):
        return str(obj)
    elif isinstance(obj, float) and not math.isfinite(obj):
        return str(obj)
    return obj


async def _read_body(request: Request) -> Any:
    """Récupère le body de la requête pour les logs (limité à 500 caractères)."""
    if request.method not in ("POST", "PUT", "PATCH"):
        return None
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body.decode())
    except (UnicodeDecodeError, ValueError):
        return body.decode(errors="replace")[:500]


async def ledger_exception_handler(
    request: Request,
    exc: LedgerError
) -> JSONResponse:
    """
    Convertit une erreur métier en notification lisible pour l'utilisateur.
    """
    error_type = type(exc).__name__
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING

    ledger_logger.log(
        level,
        f"{error_type} - {request.method} {request.url.path}: {exc.message}",
        extra={
            "extra_data": {
                "method": request.method,
                "path": request.url.path,
                "status_code": exc.status_code,
                "error_type": error_type,
                "context": make_json_serializable(exc.context),
            }
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "error_type": error_type,
        }
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Gère les erreurs de validation Pydantic.
    """
    errors = make_json_serializable(exc.errors())

    error_details = []
    for error in errors:
        field = " -> ".join(str(loc) for loc in error.get("loc", []))
        error_details.append(
            f"  • {field}: {error.get('msg', 'Validation error')} (type: {error.get('type', 'unknown')})"
        )
    error_summary = "\n".join(error_details)

    body_content = make_json_serializable(exc.body) if hasattr(exc, 'body') else None

    logger.warning(
        f"Validation Error (422) - {request.method} {request.url.path}\n"
        f"Erreurs de validation:\n{error_summary}",
        extra={
            "extra_data": {
                "method": request.method,
                "path": request.url.path,
                "status_code": 422,
                "errors": errors,
                "body": body_content,
            }
        }
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Erreur de validation",
            "errors": errors,
        }
    )


async def sqlalchemy_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """
    Gère les erreurs de base de données SQLAlchemy.
    """
    error_type = type(exc).__name__
    request_body = await _read_body(request)

    db_logger.error(
        f"Database error - {request.method} {request.url.path}",
        exc_info=True,
        extra={
            "extra_data": {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "request_body": request_body,
                "error_type": error_type,
                "error_message": str(exc),
                "status_code": 500,
            }
        }
    )

    if isinstance(exc, IntegrityError):
        error_message_lower = str(exc).lower()
        if 'unique' in error_message_lower or 'duplicate' in error_message_lower:
            if 'name' in error_message_lower:
                user_message = "Ce nom existe déjà. Veuillez en utiliser un autre."
            elif 'email' in error_message_lower:
                user_message = "Cet email existe déjà."
            elif 'username' in error_message_lower:
                user_message = "Ce nom d'utilisateur existe déjà."
            else:
                user_message = "Cette valeur existe déjà dans la base de données."
        else:
            user_message = "Erreur d'intégrité des données. Vérifiez que les données sont valides."
    else:
        user_message = "Erreur de base de données. Veuillez réessayer plus tard."

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST if isinstance(exc, IntegrityError) else status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": user_message,
            "error_type": error_type,
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Gère toutes les autres exceptions non gérées.
    """
    error_type = type(exc).__name__

    logger.error(
        f"Unhandled Exception (500) - {request.method} {request.url.path}\n"
        f"Type: {error_type}\n"
        f"Message: {exc}",
        exc_info=True,
        extra={
            "extra_data": {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "error_type": error_type,
                "error_message": str(exc),
                "status_code": 500,
            }
        }
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Une erreur interne s'est produite. Veuillez contacter l'administrateur.",
            "error_type": error_type,
        }
    )
