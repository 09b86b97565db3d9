"""
Structured JSON logging configuration.

This module provides:
- JSON-formatted single-line log output for log shippers
- Request ID propagation via contextvars
- A human-readable text format for local development

Log Structure (JSON):
{
    "timestamp": "2024-01-15T10:30:00.123Z",
    "level": "INFO",
    "logger": "api.routers.patients",
    "message": "Request completed",
    "request_id": "abc-123",
    "extra": { ... }
}

Usage:
    from core.logging_config import setup_logging

    # At app startup
    setup_logging()

    # In request handlers (request_id is auto-propagated by middleware)
    logger.info("Processing request", extra={"patient_id": 42})
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.config import LOG_FORMAT, LOG_LEVEL

# =============================================================================
# REQUEST ID CONTEXT
# =============================================================================

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context (coroutine-safe)."""
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID in context for the current request/coroutine."""
    request_id_var.set(request_id)


def clear_request_id() -> None:
    """Clear the request ID (call at end of request)."""
    request_id_var.set(None)


# =============================================================================
# JSON FORMATTER
# =============================================================================

# Attributes every LogRecord carries; anything else came from extra={...}
_STANDARD_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
})


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter.

    Produces single-line JSON logs with UTC timestamps.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as single-line JSON."""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry, default=str, ensure_ascii=False)


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
    include_uvicorn: bool = True
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level. Defaults to PATIENT_SVC_LOG_LEVEL.
        json_format: JSON output if True, text if False. Defaults to
            PATIENT_SVC_LOG_FORMAT.
        include_uvicorn: If True, route uvicorn loggers through the root handler.

    Called once at application startup (in main.py lifespan).
    """
    level = (level or LOG_LEVEL).upper()
    if json_format is None:
        json_format = LOG_FORMAT == "json"

    handler = logging.StreamHandler(sys.stdout)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for logger_name in ["core", "api", "services", "repositories"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.handlers = []  # Inherit from root
        logger.propagate = True

    if include_uvicorn:
        for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
            logger = logging.getLogger(logger_name)
            logger.handlers = []
            logger.propagate = True

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"level": level, "format": "json" if json_format else "text"}
    )
