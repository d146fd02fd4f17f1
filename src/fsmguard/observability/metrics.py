"""
Metrics — Simple counters for validation outcomes.

Counts accepted and rejected definitions, invariant violations, and
audit entries. Values are process-local; exporting them is left to the
caller via ``to_dict``.
"""

from dataclasses import dataclass, field
from threading import Lock
from typing import Any


class Counter:
    """Monotonically increasing counter."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0
        self._lock = Lock()

    def inc(self, amount: int = 1) -> None:
        """Increment counter."""
        with self._lock:
            self._value += amount

    @property
    def value(self) -> int:
        return self._value

    def reset(self) -> None:
        """Reset counter (for testing)."""
        with self._lock:
            self._value = 0


@dataclass
class MetricsRegistry:
    """
    Registry for all fsmguard metrics.
    """
    # Definition metrics
    definitions_validated: Counter = field(
        default_factory=lambda: Counter("definitions_validated", "Definitions checked")
    )
    definitions_rejected: Counter = field(
        default_factory=lambda: Counter("definitions_rejected", "Definitions rejected")
    )
    invariant_violations: Counter = field(
        default_factory=lambda: Counter("invariant_violations", "Invariant violations found")
    )

    # Audit metrics
    audit_entries_recorded: Counter = field(
        default_factory=lambda: Counter("audit_entries_recorded", "Audit entries appended")
    )
    audit_entries_rejected: Counter = field(
        default_factory=lambda: Counter("audit_entries_rejected", "Audit entries refused")
    )
    trails_verified: Counter = field(
        default_factory=lambda: Counter("trails_verified", "Trail verifications run")
    )
    trails_rejected: Counter = field(
        default_factory=lambda: Counter("trails_rejected", "Trail verifications failed")
    )

    def _counters(self) -> list[Counter]:
        return [
            self.definitions_validated,
            self.definitions_rejected,
            self.invariant_violations,
            self.audit_entries_recorded,
            self.audit_entries_rejected,
            self.trails_verified,
            self.trails_rejected,
        ]

    def to_dict(self) -> dict[str, Any]:
        """Export all metrics as dict."""
        return {
            "definitions": {
                "validated": self.definitions_validated.value,
                "rejected": self.definitions_rejected.value,
                "invariant_violations": self.invariant_violations.value,
            },
            "audit": {
                "recorded": self.audit_entries_recorded.value,
                "rejected": self.audit_entries_rejected.value,
                "trails_verified": self.trails_verified.value,
                "trails_rejected": self.trails_rejected.value,
            },
        }

    def reset(self) -> None:
        """Reset all metrics (for testing)."""
        for counter in self._counters():
            counter.reset()


# Global metrics registry
_metrics = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get global metrics registry."""
    return _metrics


def reset_metrics() -> None:
    """Reset all metrics (for testing)."""
    _metrics.reset()
