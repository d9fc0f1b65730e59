"""Structured JSON logging configuration.

Provides centralized logging setup with request ID correlation and JSON formatting.
"""

import logging
import json
import sys
from datetime import datetime, timezone

from .request_id import get_request_id

# Extra fields copied into JSON log lines when present on the record
_EXTRA_FIELDS = (
    "product_id",
    "query",
    "limit",
    "min_score",
    "result_count",
    "tool_name",
    "error_type",
    "duration_ms",
    "status_code",
    "method",
    "path",
)

# Third-party loggers that are chatty at INFO (per-request access lines, SDK retries)
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "openai", "botocore", "urllib3")


class RequestIDFilter(logging.Filter):
    """Add request_id to all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "request_id": getattr(record, "request_id", "no-request-id"),
            "logger": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["error"] = str(record.exc_info[1])
            log_data["traceback"] = self.formatException(record.exc_info)

        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, use JSON formatter; otherwise use simple format
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(request_id)s - %(name)s.%(funcName)s - %(message)s'
        )

    handler.setFormatter(formatter)
    handler.addFilter(RequestIDFilter())
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically get_logger(__name__))."""
    return logging.getLogger(name)
