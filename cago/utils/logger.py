import logging
import json
import os
import sys
import contextvars
from pathlib import Path
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from cago.config import get_settings

# Set per request by CorrelationMiddleware
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id", default="")

# Fields the middleware and metrics pass via extra={...}
EXTRA_FIELDS = (
    "method", "path", "status", "duration_ms", "client_ip",
    "error", "error_type", "service", "operation",
)


class CorrelationFilter(logging.Filter):
    """Stamp every record with the current request's correlation ID"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", ""):
            record.correlation_id = correlation_id_var.get("")
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for log drains"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if getattr(record, "correlation_id", ""):
            entry["correlation_id"] = record.correlation_id

        entry.update({key: getattr(record, key) for key in EXTRA_FIELDS if hasattr(record, key)})

        if record.levelno >= logging.WARNING:
            entry["source"] = f"{record.filename}:{record.lineno}"

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(entry, default=str)


class SimpleFormatter(logging.Formatter):
    """Human-readable formatter for local development"""

    def __init__(self):
        super().__init__(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )


def setup_logger(name: str = "cago", level: str = None) -> logging.Logger:
    """
    Setup application logger.

    Level comes from settings (LOG_LEVEL). Output is JSON when LOG_FORMAT=json,
    plain text otherwise; LOG_FILE adds a rotating JSON file log.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = level or get_settings().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)
    logger.addFilter(CorrelationFilter())

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    if os.getenv("LOG_FORMAT") == "json":
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(SimpleFormatter())
    logger.addHandler(console_handler)

    log_file = os.getenv("LOG_FILE")
    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(StructuredFormatter())
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not setup file logging: {e}")

    return logger


logger = setup_logger()


def get_logger(name: str = None) -> logging.Logger:
    """Get logger instance"""
    if name:
        return setup_logger(name)
    return logger
