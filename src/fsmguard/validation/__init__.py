"""
Validation — Gated validation stack for FSM definitions.

- Schema validator: optional JSON Schema pre-check of raw documents
- Structure validator: referential integrity
- Invariant validator: declarative global constraints
- Pipeline: gates in order, plus the strict profile
"""

from fsmguard.validation.schema_validator import (
    SchemaValidator,
    DEFINITION_SCHEMA,
    validate_schema,
)
from fsmguard.validation.structure_validator import (
    StructureValidator,
    validate_structure,
)
from fsmguard.validation.invariant_validator import (
    InvariantValidator,
    INVARIANT_RULES,
    validate_invariants,
    create_invariant_validator,
)
from fsmguard.validation.pipeline import (
    ValidatorConfig,
    DefinitionValidator,
    validate_definition,
    validate_strict,
    create_definition_validator,
)

__all__ = [
    # Schema
    "SchemaValidator",
    "DEFINITION_SCHEMA",
    "validate_schema",
    # Structure
    "StructureValidator",
    "validate_structure",
    # Invariants
    "InvariantValidator",
    "INVARIANT_RULES",
    "validate_invariants",
    "create_invariant_validator",
    # Pipeline
    "ValidatorConfig",
    "DefinitionValidator",
    "validate_definition",
    "validate_strict",
    "create_definition_validator",
]
