"""
Middleware de logging des requêtes HTTP.
"""

import time
import logging
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging import http_logger

logger = logging.getLogger(__name__)


class HTTPLoggingMiddleware(BaseHTTPMiddleware):
    """Logge chaque requête avec son statut et son temps de traitement."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        http_logger.info(
            "Request received",
            extra={
                "extra_data": {
                    "method": method,
                    "path": path,
                    "client_ip": client_ip,
                    "query_params": dict(request.query_params),
                }
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request Failed (500) - {method} {path}: {type(e).__name__}: {e}",
                exc_info=True,
                extra={
                    "extra_data": {
                        "method": method,
                        "path": path,
                        "process_time": round(process_time, 3),
                        "client_ip": client_ip,
                        "error_type": type(e).__name__,
                        "status_code": 500,
                    }
                }
            )
            raise

        process_time = time.time() - start_time
        status_code = response.status_code

        if status_code >= 500:
            log_level = logging.ERROR
            message = f"Server Error ({status_code}) - {method} {path}"
        elif status_code >= 400:
            log_level = logging.WARNING
            message = f"Client Error ({status_code}) - {method} {path}"
        else:
            log_level = logging.INFO
            message = f"{method} {path} - {status_code}"

        http_logger.log(
            log_level,
            message,
            extra={
                "extra_data": {
                    "method": method,
                    "path": path,
                    "status_code": status_code,
                    "process_time": round(process_time, 3),
                }
            }
        )

        response.headers["X-Process-Time"] = str(round(process_time, 3))
        return response
