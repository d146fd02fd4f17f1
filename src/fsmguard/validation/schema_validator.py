"""
Schema Validator — Optional JSON Schema pre-check for raw documents.

First validation gate. Checks the parsed JSON document against a JSON
Schema (Draft 2020-12) before it is turned into an FsmDefinition. The
built-in schema mirrors the documented definition format; callers may
supply their own.
"""

from typing import Any

from jsonschema import Draft202012Validator

from fsmguard.observability import get_logger
from fsmguard.results import ValidationResult, Violation
from fsmguard.vocabulary import ErrorCode, InvariantKind


logger = get_logger("validation.schema")


_STATE = {"type": "string", "minLength": 1}

_TRANSITION_REF = {
    "type": "object",
    "required": ["from", "to"],
    "additionalProperties": False,
    "properties": {
        "from": _STATE,
        "to": _STATE,
        "action": {"type": "string"},
    },
}

DEFINITION_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "FSM definition",
    "type": "object",
    "required": ["states", "transitions"],
    "additionalProperties": False,
    "properties": {
        "states": {
            "type": "array",
            "minItems": 1,
            "uniqueItems": True,
            "items": _STATE,
        },
        "transitions": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["from", "to", "action"],
                "additionalProperties": False,
                "properties": {
                    "from": _STATE,
                    "to": _STATE,
                    "action": {"type": "string", "minLength": 1},
                    "guard": {"type": "string"},
                    "metadata": {
                        "type": "object",
                        "additionalProperties": False,
                        "properties": {
                            "description": {"type": "string"},
                            "roles": {"type": "array", "items": {"type": "string"}},
                        },
                    },
                },
            },
        },
        "defaults": {
            "type": "object",
            "additionalProperties": False,
            "properties": {"initialState": _STATE},
        },
        "invariants": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["kind"],
                "additionalProperties": False,
                "properties": {
                    "kind": {"enum": [kind.value for kind in InvariantKind]},
                    "states": {"type": "array", "items": _STATE},
                    "transitions": {"type": "array", "items": _TRANSITION_REF},
                    "description": {"type": "string"},
                },
            },
        },
    },
}


class SchemaValidator:
    """
    Validates raw definition documents against a JSON Schema.

    Raises jsonschema.exceptions.SchemaError at construction when the
    supplied schema itself is invalid.
    """

    def __init__(self, schema: dict[str, Any] | None = None):
        self.schema = DEFINITION_SCHEMA if schema is None else schema
        Draft202012Validator.check_schema(self.schema)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, document: Any) -> ValidationResult:
        errors = []

        for error in sorted(self._validator.iter_errors(document), key=lambda e: e.json_path):
            errors.append(Violation(
                code=ErrorCode.SCHEMA_VIOLATION,
                message=f"{error.json_path}: {error.message}",
                location=error.json_path,
            ))

        if errors:
            logger.info(f"Schema check failed with {len(errors)} error(s)")
        return ValidationResult.from_violations(errors)


def validate_schema(document: Any, schema: dict[str, Any] | None = None) -> ValidationResult:
    """Check a raw document against the definition schema."""
    return SchemaValidator(schema).validate(document)
