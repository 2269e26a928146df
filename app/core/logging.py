"""
Configuration du système de logging pour l'API.
Gère les logs HTTP, base de données, mouvements du journal comptable, etc.
"""

import logging
import sys
from pathlib import Path
import json
from datetime import datetime, timezone

# Attributs standards d'un LogRecord, exclus des champs personnalisés
_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName", "asctime", "extra_data",
}


class JSONFormatter(logging.Formatter):
    """Formatter pour les logs en JSON structuré."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "extra_data"):
            log_data["extra"] = record.extra_data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Formatter avec couleurs pour la console (développement)."""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def __init__(self, datefmt=None):
        super().__init__(datefmt=datefmt)
        self.datefmt = datefmt or "%Y-%m-%d %H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        record.asctime = self.formatTime(record, self.datefmt)

        log_color = self.COLORS.get(record.levelname, "")
        reset = self.RESET
        bold = self.BOLD

        if record.name.startswith("uvicorn"):
            log_format = (
                f"{log_color}[{record.levelname:8}]{reset} "
                f"{record.getMessage()}"
            )
        else:
            level_display = f"{bold}{log_color}[{record.levelname:8}]{reset}"

            if record.levelno >= logging.ERROR:
                log_format = (
                    f"{level_display} {record.asctime}\n"
                    f"  {bold}Module:{reset} {record.name}\n"
                    f"  {bold}Location:{reset} {record.funcName}:{record.lineno}\n"
                    f"  {bold}Message:{reset} {log_color}{record.getMessage()}{reset}"
                )
            else:
                log_format = (
                    f"{level_display} {record.asctime} - {record.name} - "
                    f"{log_color}{record.getMessage()}{reset}"
                )

        if getattr(record, "extra_data", None):
            extra_str = "\n  ".join(f"{k}: {v}" for k, v in record.extra_data.items())
            log_format += f"\n  {bold}Details:{reset}\n  {extra_str}"

        if record.exc_info:
            log_format += f"\n{self.formatException(record.exc_info)}"

        return log_format


def _file_handler(log_dir: Path, filename: str, level: int) -> logging.FileHandler:
    handler = logging.FileHandler(log_dir / filename, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(environment: str = "development", log_dir: str = "logs") -> None:
    """
    Configure le système de logging.

    Args:
        environment: Environnement (development, production, test)
        log_dir: Répertoire des fichiers de logs
    """
    log_level = logging.DEBUG if environment == "development" else logging.INFO

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # Console : couleurs en dev, JSON sinon
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    if environment == "development":
        console_handler.setFormatter(ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    else:
        console_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(console_handler)

    # Fichiers (toujours en JSON)
    root_logger.addHandler(_file_handler(log_path, "app.log", logging.INFO))
    root_logger.addHandler(_file_handler(log_path, "errors.log", logging.ERROR))

    # Loggers dédiés, chacun avec son fichier
    for name, filename, level in (
        ("http", "http.log", logging.INFO),
        ("database", "database.log", logging.INFO),
        ("ledger", "ledger.log", logging.INFO),
    ):
        dedicated = logging.getLogger(name)
        dedicated.handlers.clear()
        dedicated.addHandler(_file_handler(log_path, filename, level))
        dedicated.setLevel(level)

    # Le logger http ne remonte pas à la console (trop verbeux)
    http_logger.propagate = False
    db_logger.propagate = False

    for name in ("uvicorn", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.setLevel(log_level)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(console_handler)

    uvicorn_access_logger = logging.getLogger("uvicorn.access")
    uvicorn_access_logger.setLevel(logging.INFO if environment == "development" else logging.WARNING)
    uvicorn_access_logger.handlers.clear()
    uvicorn_access_logger.addHandler(console_handler)

    # SQLAlchemy - seulement les warnings hors développement
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if environment == "development" else logging.WARNING
    )


# Loggers spécialisés
http_logger = logging.getLogger("http")
db_logger = logging.getLogger("database")
ledger_logger = logging.getLogger("ledger")
