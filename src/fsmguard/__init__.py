"""
fsmguard — Declarative FSM definitions, validation and audit trails.

Definitions are loaded as immutable models, checked for referential
integrity and declared invariants, and used to verify that recorded
transition histories are continuous and legal.
"""

__version__ = "0.1.0"

from fsmguard.results import ValidationResult, Violation
from fsmguard.definition import FsmDefinition, parse_definition
from fsmguard.validation import DefinitionValidator, ValidatorConfig, validate_definition
from fsmguard.audit import AuditEntry, AuditTrail

__all__ = [
    "__version__",
    # Results
    "ValidationResult",
    "Violation",
    # Definitions
    "FsmDefinition",
    "parse_definition",
    "DefinitionValidator",
    "ValidatorConfig",
    "validate_definition",
    # Audit
    "AuditEntry",
    "AuditTrail",
]
