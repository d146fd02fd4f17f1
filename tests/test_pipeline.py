"""
Tests for the gated definition validation pipeline.
"""

import pytest

from fsmguard.definition import parse_definition
from fsmguard.observability import get_metrics
from fsmguard.validation import (
    DefinitionValidator,
    ValidatorConfig,
    create_definition_validator,
    validate_definition,
    validate_strict,
)
from fsmguard.vocabulary import ErrorCategory, ErrorCode


class TestEndToEnd:
    """The Draft/Approved/Active/Archived lifecycle."""

    def test_lifecycle_is_valid(self, lifecycle_document):
        result = validate_definition(parse_definition(lifecycle_document))
        assert result.valid
        assert result.errors == []

    def test_revert_from_terminal_state_fails(self, lifecycle_document):
        lifecycle_document["transitions"].append({"from": "Archived", "to": "Draft", "action": "revert"})
        result = validate_definition(parse_definition(lifecycle_document))
        assert not result.valid
        assert result.first_error.code == ErrorCode.TERMINAL_STATE_HAS_OUTBOUND
        assert result.first_error.state == "Archived"

    def test_accepted_definitions_are_closed(self, lifecycle_document):
        definition = parse_definition(lifecycle_document)
        assert validate_definition(definition).valid
        declared = set(definition.states)
        for transition in definition.transitions:
            assert transition.from_state in declared
            assert transition.to_state in declared


class TestGating:
    """Invariants only run on structurally sound definitions."""

    def test_structure_failure_skips_invariants(self, make_definition):
        definition = make_definition(
            ["A", "A"], [("A", "B", "go")],
            invariants=[{"kind": "made_up_kind"}],
        )
        result = validate_definition(definition)
        assert result.codes == [ErrorCode.DUPLICATE_STATE, ErrorCode.UNKNOWN_STATE]
        assert all(e.category is ErrorCategory.STRUCTURAL for e in result.errors)

    def test_unknown_kind_after_structure(self, make_definition):
        definition = make_definition(["A", "B"], [("A", "B", "go")], invariants=[{"kind": "made_up_kind"}])
        assert validate_definition(definition).codes == [ErrorCode.UNKNOWN_INVARIANT_KIND]

    def test_wrong_type_hides_unknown_kind(self, lifecycle_document):
        lifecycle_document["states"] = "Draft"
        lifecycle_document["invariants"].append({"kind": "made_up_kind"})
        result = DefinitionValidator().validate_document(lifecycle_document)
        assert set(result.codes) == {ErrorCode.INVALID_SHAPE}

    def test_extra_key_hides_unknown_kind(self, lifecycle_document):
        lifecycle_document["owner"] = "ops"
        lifecycle_document["invariants"].append({"kind": "made_up_kind"})
        result = DefinitionValidator().validate_document(lifecycle_document)
        assert result.codes == [ErrorCode.UNKNOWN_FIELD]

    def test_validation_is_pure(self, lifecycle_document):
        definition = parse_definition(lifecycle_document)
        before = definition.model_dump()
        first = validate_definition(definition)
        second = validate_definition(definition)
        assert definition.model_dump() == before
        assert first == second

    def test_metrics(self, lifecycle_document, make_definition):
        validator = create_definition_validator()
        validator.validate_definition(parse_definition(lifecycle_document))
        validator.validate_definition(make_definition(["A", "A"], [("A", "A", "stay")]))
        metrics = get_metrics()
        assert metrics.definitions_validated.value == 2
        assert metrics.definitions_rejected.value == 1


class TestStrictProfile:
    """Tests for the strict profile."""

    def test_requires_invariants_and_initial_state(self, make_definition):
        result = validate_strict(make_definition(["A", "B"], [("A", "B", "go")]))
        assert result.codes == [ErrorCode.MISSING_INVARIANTS, ErrorCode.MISSING_INITIAL_STATE]
        assert all(e.category is ErrorCategory.STRICT for e in result.errors)

    def test_strict_passes(self, lifecycle_document):
        lifecycle_document["defaults"] = {"initialState": "Draft"}
        config = ValidatorConfig(strict=True)
        assert DefinitionValidator(config).validate_definition(parse_definition(lifecycle_document)).valid

    def test_strict_off_by_default(self, make_definition):
        assert validate_definition(make_definition(["A", "B"], [("A", "B", "go")])).valid

    def test_unreachable_states_are_warnings(self, make_definition):
        definition = make_definition(
            ["A", "B", "C"], [("A", "B", "go"), ("C", "B", "go")],
            invariants=[{"kind": "terminal_states", "states": ["B"]}],
            initial_state="A",
        )
        result = validate_definition(definition, ValidatorConfig(strict=True))
        assert result.valid
        assert [(w.code, w.state) for w in result.warnings] == [(ErrorCode.UNREACHABLE_STATE, "C")]


class TestValidateDocument:
    """Tests for raw document validation."""

    @pytest.fixture
    def validator(self) -> DefinitionValidator:
        return DefinitionValidator(ValidatorConfig(schema_check=True))

    def test_valid_document(self, validator, lifecycle_document):
        assert validator.validate_document(lifecycle_document).valid

    def test_schema_gate_runs_first(self, validator, lifecycle_document):
        lifecycle_document["owner"] = "ops"
        result = validator.validate_document(lifecycle_document)
        assert result.codes == [ErrorCode.SCHEMA_VIOLATION]

    def test_without_schema_unknown_field_is_structural(self, lifecycle_document):
        lifecycle_document["owner"] = "ops"
        result = DefinitionValidator().validate_document(lifecycle_document)
        assert result.codes == [ErrorCode.UNKNOWN_FIELD]

    def test_shape_errors_become_results(self):
        result = DefinitionValidator().validate_document({"states": ["A"]})
        assert not result.valid
        assert result.first_error.code == ErrorCode.INVALID_SHAPE
        assert get_metrics().definitions_rejected.value == 1

    def test_custom_schema(self, lifecycle_document):
        schema = {"type": "object", "required": ["states", "transitions", "defaults"]}
        validator = DefinitionValidator(ValidatorConfig(schema_check=True, schema=schema))
        assert validator.validate_document(lifecycle_document).codes == [ErrorCode.SCHEMA_VIOLATION]

    def test_schema_rejection_counted_once(self, validator, lifecycle_document):
        lifecycle_document["owner"] = "ops"
        validator.validate_document(lifecycle_document)
        metrics = get_metrics()
        assert metrics.definitions_validated.value == 1
        assert metrics.definitions_rejected.value == 1

    def test_loader_rejection_counted_once(self):
        DefinitionValidator().validate_document({"states": ["A"]})
        metrics = get_metrics()
        assert metrics.definitions_validated.value == 1
        assert metrics.definitions_rejected.value == 1

    def test_accepted_document_counted_once(self, validator, lifecycle_document):
        validator.validate_document(lifecycle_document)
        metrics = get_metrics()
        assert metrics.definitions_validated.value == 1
        assert metrics.definitions_rejected.value == 0
