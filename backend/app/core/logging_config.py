"""
Logging setup for the RCI calculator.

Production emits one JSON object per line; development and tests use a plain
text line. Calculation inputs never reach the logs, only outcomes and codes.
"""
import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.core.config import settings

# Set by RequestLoggingMiddleware while a request is in flight
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# LogRecord extras that are copied into the JSON entry when present
_EXTRA_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_host",
    "error_id",
    "error_code",
    "mode",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
_TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """
    Render a LogRecord as a single JSON line for log aggregation.

    Fields: timestamp (UTC, ISO 8601), level, logger, message, plus the
    request_id of the current request and any whitelisted extras. Records
    at ERROR and above also carry their source location.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_context.get()
        if request_id:
            entry["request_id"] = request_id

        entry.update(
            {
                name: getattr(record, name)
                for name in _EXTRA_FIELDS
                if hasattr(record, name)
            }
        )

        if record.levelno >= logging.ERROR:
            entry["source"] = f"{record.pathname}:{record.lineno}"
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _logger_entry(level: int, handlers: List[str]) -> Dict[str, Any]:
    return {"level": level, "handlers": handlers, "propagate": False}


def setup_logging() -> None:
    """
    Apply the logging configuration derived from settings.

    The "app" logger tree gets its own handler and does not propagate, so
    library loggers configured on root cannot duplicate application lines.
    Uvicorn's access log is quieted in DEBUG since RequestLoggingMiddleware
    already records every request.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    formatter = "json" if settings.ENV == "production" else "default"
    access_level = logging.WARNING if settings.DEBUG else logging.INFO

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": _TEXT_FORMAT, "datefmt": _TEXT_DATEFMT},
                "json": {"()": JSONFormatter},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": formatter,
                    "stream": sys.stdout,
                },
            },
            "root": {"level": log_level, "handlers": ["console"]},
            "loggers": {
                "app": _logger_entry(log_level, ["console"]),
                "uvicorn.access": _logger_entry(access_level, ["console"]),
            },
        }
    )
