"""
Structure Validator — Referential integrity of an FSM definition.

Second validation gate (after the optional schema pre-check). Ensures:
- States are non-empty, unique and non-blank
- Transitions are non-empty and reference declared states
- Actions are not blank
- The initial state, if any, is declared
- No undocumented properties anywhere

Invariant evaluation assumes a definition that passed this gate.
"""

from collections import Counter

from fsmguard.definition.models import FsmDefinition
from fsmguard.observability import get_logger
from fsmguard.results import ValidationResult, Violation
from fsmguard.vocabulary import ErrorCode


logger = get_logger("validation.structure")


class StructureValidator:
    """
    Validates the shape and references of a definition.

    Every check runs and all violations are reported; ``errors[0]`` is the
    first one in check order.
    """

    def validate(self, definition: FsmDefinition) -> ValidationResult:
        errors: list[Violation] = []
        warnings: list[Violation] = []

        errors.extend(self._check_states(definition))
        errors.extend(self._check_transitions(definition))
        errors.extend(self._check_initial_state(definition))
        errors.extend(self._check_roles(definition))
        errors.extend(self._check_unknown_fields(definition))
        warnings.extend(self._check_invariant_references(definition))

        result = ValidationResult.from_violations(errors, warnings)
        if result.valid:
            logger.debug("Structure OK")
        else:
            logger.info(f"Structure rejected: {[e.code.value for e in errors]}")
        return result

    def _check_states(self, definition: FsmDefinition) -> list[Violation]:
        errors = []

        if not definition.states:
            errors.append(Violation(
                code=ErrorCode.EMPTY_STATES,
                message="Definition declares no states",
                location="states",
            ))
            return errors

        for index, state in enumerate(definition.states):
            if not state.strip():
                errors.append(Violation(
                    code=ErrorCode.EMPTY_STATE_NAME,
                    message=f"State at index {index} has a blank name",
                    state=state,
                    location=f"states[{index}]",
                ))

        counts = Counter(definition.states)
        for state, count in counts.items():
            if count > 1:
                errors.append(Violation(
                    code=ErrorCode.DUPLICATE_STATE,
                    message=f"State '{state}' is declared {count} times",
                    state=state,
                    location="states",
                ))

        return errors

    def _check_transitions(self, definition: FsmDefinition) -> list[Violation]:
        errors = []

        if not definition.transitions:
            errors.append(Violation(
                code=ErrorCode.EMPTY_TRANSITIONS,
                message="Definition declares no transitions",
                location="transitions",
            ))
            return errors

        declared = set(definition.states)

        for index, transition in enumerate(definition.transitions):
            location = f"transitions[{index}]"
            edge = transition.key()

            for endpoint, state in (("from", transition.from_state), ("to", transition.to_state)):
                if state not in declared:
                    errors.append(Violation(
                        code=ErrorCode.UNKNOWN_STATE,
                        message=f"Transition {index} '{endpoint}' references undeclared state '{state}'",
                        state=state,
                        transition=edge,
                        location=f"{location}.{endpoint}",
                    ))

            if not transition.action.strip():
                errors.append(Violation(
                    code=ErrorCode.EMPTY_ACTION,
                    message=f"Transition {index} has a blank action",
                    transition=edge,
                    location=f"{location}.action",
                ))

        return errors

    def _check_initial_state(self, definition: FsmDefinition) -> list[Violation]:
        initial = definition.initial_state
        if initial is None or definition.is_declared(initial):
            return []
        return [Violation(
            code=ErrorCode.INVALID_INITIAL_STATE,
            message=f"Initial state '{initial}' is not a declared state",
            state=initial,
            location="defaults.initialState",
        )]

    def _check_roles(self, definition: FsmDefinition) -> list[Violation]:
        """Roles must be strings; catches models built without validation."""
        errors = []
        for index, transition in enumerate(definition.transitions):
            if transition.metadata is None:
                continue
            for role_index, role in enumerate(transition.metadata.roles):
                if not isinstance(role, str):
                    errors.append(Violation(
                        code=ErrorCode.UNKNOWN_FIELD,
                        message=f"Transition {index} role {role_index} is not a string",
                        transition=transition.key(),
                        location=f"transitions[{index}].metadata.roles[{role_index}]",
                    ))
        return errors

    def _check_unknown_fields(self, definition: FsmDefinition) -> list[Violation]:
        errors = []
        for location, name in definition.unknown_fields():
            path = f"{location}.{name}" if location else name
            errors.append(Violation(
                code=ErrorCode.UNKNOWN_FIELD,
                message=f"Unknown property '{path}'",
                location=path,
            ))
        return errors

    def _check_invariant_references(self, definition: FsmDefinition) -> list[Violation]:
        """Warn when an invariant names states the definition never declares."""
        warnings = []
        declared = set(definition.states)

        for index, invariant in enumerate(definition.invariants):
            referenced = list(invariant.states)
            for ref in invariant.transitions:
                referenced.extend((ref.from_state, ref.to_state))

            for state in dict.fromkeys(referenced):
                if state not in declared:
                    warnings.append(Violation(
                        code=ErrorCode.UNDECLARED_REFERENCE,
                        message=f"Invariant {index} ({invariant.kind}) references undeclared state '{state}'",
                        state=state,
                        invariant_index=index,
                        location=f"invariants[{index}]",
                    ))

        return warnings


def validate_structure(definition: FsmDefinition) -> ValidationResult:
    """Validate a definition's referential integrity."""
    return StructureValidator().validate(definition)
