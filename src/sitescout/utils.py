"""Utility functions for sitescout."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from sitescout.exceptions import generate_correlation_id

LOGGER = logging.getLogger(__name__)


def log_with_correlation(
    logger: logging.Logger,
    level: int,
    message: str,
    correlation_id: str | None = None,
    **kwargs: Any,
) -> None:
    """
    Log a message with correlation ID and additional context.

    Args:
        logger: Logger instance to use.
        level: Logging level (e.g., logging.INFO, logging.ERROR).
        message: Log message format string.
        correlation_id: Optional correlation ID. If None, generates a new one.
        **kwargs: Additional context to include in log extra fields.
    """
    corr_id = correlation_id or generate_correlation_id()
    extra = {"correlation_id": corr_id, **kwargs}
    logger.log(level, message, extra=extra)


def strip_www(host: str) -> str:
    """
    Remove one leading ``www.`` label from a host for comparison.

    Args:
        host: Host (netloc) string.

    Returns:
        Host without the ``www.`` prefix.
    """
    if host.startswith("www."):
        return host[4:]
    return host


def origin_of(scheme: str, host: str) -> str:
    """Build ``scheme://host`` without a trailing slash."""
    return f"{scheme}://{host}"


# Attributes every LogRecord has; anything else on a record came from ``extra``
_STANDARD_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "correlation_id",
    }
)


class JSONFormatter(logging.Formatter):
    """
    Structured JSON formatter, one object per line.

    Each entry carries timestamp, level, logger, message, the record's
    correlation ID (when it has one), the service name and any ``extra``
    fields passed to the log call.
    """

    def __init__(self, service_name: str = "sitescout", include_location: bool = False):
        super().__init__()
        self.service_name = service_name
        self.include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service_name": self.service_name,
        }

        correlation_id = getattr(record, "correlation_id", None)
        if isinstance(correlation_id, str):
            log_entry["correlation_id"] = correlation_id

        if self.include_location:
            log_entry["module"] = record.module
            log_entry["line"] = record.lineno

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)
