"""
Vocabulary enums — the shared language of fsmguard.

Invariant kinds, error categories and stable error codes referenced by
the validators, the audit trail and the CLI.
"""

from enum import Enum


# =============================================================================
# INVARIANT KINDS
# =============================================================================

class InvariantKind(str, Enum):
    """
    Declarative invariant kinds understood by the invariant evaluator.

    Any other ``kind`` string in a definition is rejected with
    UNKNOWN_INVARIANT_KIND.
    """
    TERMINAL_STATES = "terminal_states"
    REQUIRED_TRANSITIONS = "required_transitions"
    FORBIDDEN_TRANSITIONS = "forbidden_transitions"
    FORBIDDEN_CYCLES = "forbidden_cycles"
    SELF_TRANSITIONS_REQUIRED = "self_transitions_required"

    @classmethod
    def parse(cls, value: str) -> "InvariantKind | None":
        """Return the matching kind, or None for unsupported strings."""
        try:
            return cls(value)
        except ValueError:
            return None


# =============================================================================
# ERROR TAXONOMY
# =============================================================================

class ErrorCategory(str, Enum):
    """Top-level classification of a violation."""
    INPUT = "InputError"
    STRUCTURAL = "StructuralError"
    INVARIANT = "InvariantViolation"
    STATE_TRANSITION = "StateTransitionError"
    STRICT = "StrictProfileError"


class ErrorCode(str, Enum):
    """
    Stable error codes.

    Values are part of the public output and must not change.
    """
    # InputError
    INVALID_JSON = "InvalidJson"
    INVALID_SHAPE = "InvalidShape"
    SCHEMA_VIOLATION = "SchemaViolation"
    INVALID_SCHEMA = "InvalidSchema"

    # StructuralError
    EMPTY_STATES = "EmptyStates"
    EMPTY_TRANSITIONS = "EmptyTransitions"
    EMPTY_STATE_NAME = "EmptyStateName"
    DUPLICATE_STATE = "DuplicateState"
    UNKNOWN_STATE = "UnknownState"
    EMPTY_ACTION = "EmptyAction"
    INVALID_INITIAL_STATE = "InvalidInitialState"
    UNKNOWN_FIELD = "UnknownField"
    UNDECLARED_REFERENCE = "UndeclaredReference"  # warning only

    # InvariantViolation
    TERMINAL_STATE_HAS_OUTBOUND = "TerminalStateHasOutbound"
    MISSING_REQUIRED_TRANSITION = "MissingRequiredTransition"
    FORBIDDEN_TRANSITION_PRESENT = "ForbiddenTransitionPresent"
    CYCLE_DETECTED = "CycleDetected"
    MISSING_SELF_TRANSITION = "MissingSelfTransition"
    UNKNOWN_INVARIANT_KIND = "UnknownInvariantKind"

    # StateTransitionError
    UNDECLARED_TRANSITION = "UndeclaredTransition"
    INVALID_STATE_TRANSITION = "InvalidStateTransition"

    # Strict profile
    MISSING_INVARIANTS = "MissingInvariants"
    MISSING_INITIAL_STATE = "MissingInitialState"
    UNREACHABLE_STATE = "UnreachableState"  # warning only

    @property
    def category(self) -> ErrorCategory:
        return ERROR_CATEGORIES[self]


ERROR_CATEGORIES: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.INVALID_JSON: ErrorCategory.INPUT,
    ErrorCode.INVALID_SHAPE: ErrorCategory.INPUT,
    ErrorCode.SCHEMA_VIOLATION: ErrorCategory.INPUT,
    ErrorCode.INVALID_SCHEMA: ErrorCategory.INPUT,
    ErrorCode.EMPTY_STATES: ErrorCategory.STRUCTURAL,
    ErrorCode.EMPTY_TRANSITIONS: ErrorCategory.STRUCTURAL,
    ErrorCode.EMPTY_STATE_NAME: ErrorCategory.STRUCTURAL,
    ErrorCode.DUPLICATE_STATE: ErrorCategory.STRUCTURAL,
    ErrorCode.UNKNOWN_STATE: ErrorCategory.STRUCTURAL,
    ErrorCode.EMPTY_ACTION: ErrorCategory.STRUCTURAL,
    ErrorCode.INVALID_INITIAL_STATE: ErrorCategory.STRUCTURAL,
    ErrorCode.UNKNOWN_FIELD: ErrorCategory.STRUCTURAL,
    ErrorCode.UNDECLARED_REFERENCE: ErrorCategory.STRUCTURAL,
    ErrorCode.TERMINAL_STATE_HAS_OUTBOUND: ErrorCategory.INVARIANT,
    ErrorCode.MISSING_REQUIRED_TRANSITION: ErrorCategory.INVARIANT,
    ErrorCode.FORBIDDEN_TRANSITION_PRESENT: ErrorCategory.INVARIANT,
    ErrorCode.CYCLE_DETECTED: ErrorCategory.INVARIANT,
    ErrorCode.MISSING_SELF_TRANSITION: ErrorCategory.INVARIANT,
    ErrorCode.UNKNOWN_INVARIANT_KIND: ErrorCategory.INVARIANT,
    ErrorCode.UNDECLARED_TRANSITION: ErrorCategory.STATE_TRANSITION,
    ErrorCode.INVALID_STATE_TRANSITION: ErrorCategory.STATE_TRANSITION,
    ErrorCode.MISSING_INVARIANTS: ErrorCategory.STRICT,
    ErrorCode.MISSING_INITIAL_STATE: ErrorCategory.STRICT,
    ErrorCode.UNREACHABLE_STATE: ErrorCategory.STRICT,
}
