"""
Logging — Structured logging with correlation ID propagation.

All fsmguard loggers live under the ``fsmguard`` namespace. The audit
trail sets the entity id as correlation id while it records an entry,
so log lines can be grouped per process entity.
"""

import logging
import json
import sys
from contextvars import ContextVar
from typing import Any


# Context variable for correlation ID
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(cid: Any) -> None:
    """Set correlation ID for current context."""
    _correlation_id.set(str(cid) if cid is not None else None)


def get_correlation_id() -> str | None:
    """Get correlation ID from current context."""
    return _correlation_id.get()


class CorrelationFilter(logging.Filter):
    """Adds correlation_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON for structured logging.

    Timestamps come from the log record itself.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", None),
        }

        # Add extra fields
        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ReadableFormatter(logging.Formatter):
    """
    Human-readable formatter for terminals.
    """

    def format(self, record: logging.LogRecord) -> str:
        cid = getattr(record, "correlation_id", "-")

        base = f"{record.levelname:<7} [{cid}] {record.name}: {record.getMessage()}"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def configure_logging(
    level: int = logging.INFO,
    json_format: bool = False,
    stream: Any = None,
) -> None:
    """
    Configure fsmguard logging.

    Args:
        level: Logging level
        json_format: Use JSON format (for log shipping)
        stream: Output stream (default: stderr)
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(CorrelationFilter())

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ReadableFormatter())

    package_logger = logging.getLogger("fsmguard")
    package_logger.setLevel(level)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for an fsmguard component."""
    return logging.getLogger(f"fsmguard.{name}")


class LogContext:
    """
    Context manager for logging with correlation ID.

    Usage:
        with LogContext(entity_id):
            logger.info("Recording...")  # Includes correlation_id
    """

    def __init__(self, correlation_id: Any):
        self.correlation_id = correlation_id
        self._token = None

    def __enter__(self):
        self._token = _correlation_id.set(
            str(self.correlation_id) if self.correlation_id is not None else None
        )
        return self

    def __exit__(self, *args):
        if self._token is not None:
            _correlation_id.reset(self._token)
