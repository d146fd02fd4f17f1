"""
Definition — Declarative FSM model and its loader.

- Models: FsmDefinition and its parts (pure data)
- Loader: JSON-like document to model, shape errors as INPUT violations
"""

from fsmguard.definition.models import (
    FsmDefinition,
    FsmTransition,
    FsmTransitionMetadata,
    FsmTransitionRef,
    FsmDefaults,
    FsmInvariant,
)
from fsmguard.definition.loader import (
    DefinitionInputError,
    parse_definition,
    load_definition_text,
)

__all__ = [
    # Models
    "FsmDefinition",
    "FsmTransition",
    "FsmTransitionMetadata",
    "FsmTransitionRef",
    "FsmDefaults",
    "FsmInvariant",
    # Loader
    "DefinitionInputError",
    "parse_definition",
    "load_definition_text",
]
