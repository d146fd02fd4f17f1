"""
Validation Pipeline — Gated definition validation.

Runs the gates in order and stops at the first failing gate:
1. Schema pre-check (optional, raw document)
2. Loader (document shape)
3. Structure (referential integrity)
4. Invariants (only on structurally sound definitions)
5. Strict profile (optional)

An invariant with an unknown kind is therefore only reported when the
rest of the document gets through gates 2 and 3: a wrongly typed field
yields only InvalidShape, an extra key yields only UnknownField, and
neither comes with UnknownInvariantKind.
"""

from dataclasses import dataclass
from typing import Any

from fsmguard.definition import DefinitionInputError, FsmDefinition, parse_definition
from fsmguard.graph import TransitionGraph
from fsmguard.observability import get_logger, get_metrics
from fsmguard.results import ValidationResult, Violation
from fsmguard.validation.invariant_validator import InvariantValidator
from fsmguard.validation.schema_validator import SchemaValidator
from fsmguard.validation.structure_validator import StructureValidator
from fsmguard.vocabulary import ErrorCode


logger = get_logger("validation.pipeline")


@dataclass
class ValidatorConfig:
    """Configuration for the definition validation pipeline."""
    strict: bool = False          # Require invariants and an initial state
    schema_check: bool = False    # Run the JSON Schema pre-check on documents
    schema: dict[str, Any] | None = None  # None means the built-in schema


def validate_strict(definition: FsmDefinition) -> ValidationResult:
    """
    Strict profile for production definitions.

    Requires at least one invariant and a declared initial state. States
    unreachable from the initial state are reported as warnings.
    """
    errors: list[Violation] = []
    warnings: list[Violation] = []

    if not definition.invariants:
        errors.append(Violation(
            code=ErrorCode.MISSING_INVARIANTS,
            message="Strict mode requires at least one invariant",
            location="invariants",
        ))

    initial = definition.initial_state
    if initial is None:
        errors.append(Violation(
            code=ErrorCode.MISSING_INITIAL_STATE,
            message="Strict mode requires defaults.initialState",
            location="defaults.initialState",
        ))
    else:
        reachable = TransitionGraph.from_definition(definition).reachable_from(initial)
        for state in definition.states:
            if state != initial and state not in reachable:
                warnings.append(Violation(
                    code=ErrorCode.UNREACHABLE_STATE,
                    message=f"State '{state}' is not reachable from initial state '{initial}'",
                    state=state,
                ))

    return ValidationResult.from_violations(errors, warnings)


class DefinitionValidator:
    """
    Definition validator combining all gates.

    Later gates only run when earlier ones pass; warnings accumulate
    across every gate that ran.
    """

    def __init__(self, config: ValidatorConfig | None = None):
        self.config = config or ValidatorConfig()
        self._structure = StructureValidator()
        self._invariants = InvariantValidator()
        self._schema = SchemaValidator(self.config.schema) if self.config.schema_check else None

    def validate_definition(self, definition: FsmDefinition) -> ValidationResult:
        """Structure, then invariants, then (optionally) the strict profile."""
        get_metrics().definitions_validated.inc()
        return self._run(definition)

    def validate_document(self, document: Any) -> ValidationResult:
        """Validate a parsed JSON document end to end."""
        metrics = get_metrics()
        metrics.definitions_validated.inc()

        if self._schema is not None:
            schema_result = self._schema.validate(document)
            if not schema_result.valid:
                metrics.definitions_rejected.inc()
                logger.info(f"Document rejected by schema: {schema_result.first_error}")
                return schema_result

        try:
            definition = parse_definition(document)
        except DefinitionInputError as exc:
            metrics.definitions_rejected.inc()
            logger.info(f"Document rejected by loader: {exc.violations[0]}")
            return ValidationResult.failure(exc.violations)

        return self._run(definition)

    def _run(self, definition: FsmDefinition) -> ValidationResult:
        metrics = get_metrics()
        result = self._structure.validate(definition)
        if result.valid:
            result = result.merge(self._invariants.validate(definition))
        if result.valid and self.config.strict:
            result = result.merge(validate_strict(definition))

        if not result.valid:
            metrics.definitions_rejected.inc()
            logger.info(f"Definition rejected: {result.first_error}")
        else:
            logger.debug("Definition accepted")
        return result


def validate_definition(
    definition: FsmDefinition, config: ValidatorConfig | None = None
) -> ValidationResult:
    """Run structure and invariant validation on a definition."""
    return DefinitionValidator(config).validate_definition(definition)


def create_definition_validator(config: ValidatorConfig | None = None) -> DefinitionValidator:
    """Create a definition validator instance."""
    return DefinitionValidator(config)
