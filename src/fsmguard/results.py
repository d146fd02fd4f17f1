"""
Results — Canonical violation records shared by every validator.

Each check returns a ValidationResult; nothing in the engine raises for a
rule violation. A Violation pairs a stable ErrorCode with enough location
context to find the cause without re-parsing the input.
"""

from dataclasses import dataclass, field
from typing import Any

from fsmguard.vocabulary import ErrorCategory, ErrorCode


@dataclass(frozen=True)
class Violation:
    """Single rejection reason (or warning) with its location."""
    code: ErrorCode
    message: str
    state: str | None = None
    transition: tuple[str, ...] | None = None
    invariant_index: int | None = None
    entity_id: str | None = None
    position: int | None = None
    location: str | None = None

    @property
    def category(self) -> ErrorCategory:
        return self.code.category

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "category": self.category.value,
            "code": self.code.value,
            "message": self.message,
        }
        for key in ("state", "invariant_index", "entity_id", "position", "location"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.transition is not None:
            data["transition"] = list(self.transition)
        return data

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


@dataclass
class ValidationResult:
    """Result of a validation check."""
    valid: bool
    errors: list[Violation] = field(default_factory=list)
    warnings: list[Violation] = field(default_factory=list)

    @classmethod
    def success(cls, warnings: list[Violation] | None = None) -> "ValidationResult":
        return cls(valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(
        cls, errors: list[Violation], warnings: list[Violation] | None = None
    ) -> "ValidationResult":
        return cls(valid=False, errors=errors, warnings=warnings or [])

    @classmethod
    def from_violations(
        cls, errors: list[Violation], warnings: list[Violation] | None = None
    ) -> "ValidationResult":
        """Valid exactly when ``errors`` is empty."""
        return cls(valid=not errors, errors=errors, warnings=warnings or [])

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Combine two results."""
        return ValidationResult(
            valid=self.valid and other.valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )

    @property
    def first_error(self) -> Violation | None:
        """The violation a fail-fast caller would have seen."""
        return self.errors[0] if self.errors else None

    @property
    def codes(self) -> list[ErrorCode]:
        return [error.code for error in self.errors]

    def has_code(self, code: ErrorCode) -> bool:
        return any(error.code == code for error in self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [error.to_dict() for error in self.errors],
            "warnings": [warning.to_dict() for warning in self.warnings],
        }

    def __bool__(self) -> bool:
        return self.valid
