"""
Configuration du logging pour les opérations de base de données.
"""

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import Pool

from app.core.logging import db_logger


@event.listens_for(Engine, "before_cursor_execute")
def receive_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log les requêtes SQL avant exécution."""
    db_logger.debug(
        "SQL query",
        extra={
            "extra_data": {
                "statement": statement,
                "parameters": parameters if parameters else None,
                "executemany": executemany,
            }
        }
    )


@event.listens_for(Engine, "handle_error")
def receive_handle_error(exception_context):
    """Log les erreurs SQL (l'exception est ensuite propagée normalement)."""
    db_logger.error(
        "SQL error",
        extra={
            "extra_data": {
                "statement": exception_context.statement,
                "error": str(exception_context.original_exception),
            }
        }
    )


@event.listens_for(Pool, "connect")
def receive_connect(dbapi_conn, connection_record):
    """Log les nouvelles connexions à la base de données."""
    db_logger.info(
        "Database connection established",
        extra={
            "extra_data": {
                "connection_id": id(dbapi_conn),
            }
        }
    )
