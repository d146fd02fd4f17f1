"""
Definition Loader — Parsed JSON document to FsmDefinition.

Shape problems (wrong types, missing required fields) become INPUT
violations carried by DefinitionInputError. Undocumented properties are
kept on the model and reported later as UNKNOWN_FIELD by the structural
validator.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from fsmguard.definition.models import FsmDefinition
from fsmguard.observability import get_logger
from fsmguard.results import Violation
from fsmguard.vocabulary import ErrorCode


logger = get_logger("definition.loader")


class DefinitionInputError(ValueError):
    """Raw definition input does not have the documented shape."""

    def __init__(self, violations: list[Violation]):
        self.violations = violations
        summary = "; ".join(str(v) for v in violations[:3])
        super().__init__(f"Invalid definition input: {summary}")


def format_location(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location as ``transitions[0].from``."""
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        elif parts:
            parts.append(f".{item}")
        else:
            parts.append(str(item))
    return "".join(parts)


def violations_from_pydantic(exc: ValidationError) -> list[Violation]:
    """Map pydantic errors onto INVALID_SHAPE violations."""
    violations = []
    for error in exc.errors():
        location = format_location(tuple(error.get("loc", ())))
        violations.append(Violation(
            code=ErrorCode.INVALID_SHAPE,
            message=f"{location or '<document>'}: {error.get('msg', 'invalid value')}",
            location=location or None,
        ))
    return violations


def parse_definition(document: Mapping[str, Any]) -> FsmDefinition:
    """
    Build an FsmDefinition from a JSON-like mapping.

    Only wire names (``from``, ``to``, ``initialState``) are accepted.

    Raises:
        DefinitionInputError: the document does not have the documented shape
    """
    if not isinstance(document, Mapping):
        raise DefinitionInputError([Violation(
            code=ErrorCode.INVALID_SHAPE,
            message=f"Definition must be an object, got {type(document).__name__}",
        )])

    try:
        definition = FsmDefinition.model_validate(dict(document), by_name=False)
    except ValidationError as exc:
        violations = violations_from_pydantic(exc)
        logger.info(f"Definition rejected at parse time: {len(violations)} shape error(s)")
        raise DefinitionInputError(violations) from exc

    logger.debug(
        f"Parsed definition: {len(definition.states)} states, "
        f"{len(definition.transitions)} transitions"
    )
    return definition


def load_definition_text(text: str) -> FsmDefinition:
    """
    Parse JSON text into an FsmDefinition.

    Raises:
        DefinitionInputError: invalid JSON or invalid shape
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DefinitionInputError([Violation(
            code=ErrorCode.INVALID_JSON,
            message=f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}",
            position=exc.lineno,
        )]) from exc
    return parse_definition(document)
