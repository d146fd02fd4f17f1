"""
Vocabulary — Enumerated types forming the shared language of the system.
"""

from fsmguard.vocabulary.enums import (
    InvariantKind,
    ErrorCategory,
    ErrorCode,
    ERROR_CATEGORIES,
)

__all__ = [
    "InvariantKind",
    "ErrorCategory",
    "ErrorCode",
    "ERROR_CATEGORIES",
]
