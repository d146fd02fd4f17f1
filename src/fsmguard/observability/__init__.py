"""
Observability — Logging and metrics for fsmguard.

Provides:
- Structured logging with correlation ID
- Outcome counters for definitions and audit trails
"""

from fsmguard.observability.logging import (
    set_correlation_id,
    get_correlation_id,
    configure_logging,
    get_logger,
    LogContext,
    CorrelationFilter,
    JSONFormatter,
    ReadableFormatter,
)
from fsmguard.observability.metrics import (
    Counter,
    MetricsRegistry,
    get_metrics,
    reset_metrics,
)

__all__ = [
    # Logging
    "set_correlation_id",
    "get_correlation_id",
    "configure_logging",
    "get_logger",
    "LogContext",
    "CorrelationFilter",
    "JSONFormatter",
    "ReadableFormatter",
    # Metrics
    "Counter",
    "MetricsRegistry",
    "get_metrics",
    "reset_metrics",
]
