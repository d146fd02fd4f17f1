"""
Audit Codec — JSON Lines interchange for audit entries.

Strings in, strings out; reading and writing files is the caller's job.
"""

import json
from collections.abc import Iterable

from pydantic import ValidationError

from fsmguard.audit.record import AuditEntry
from fsmguard.definition.loader import violations_from_pydantic
from fsmguard.results import Violation
from fsmguard.vocabulary import ErrorCode


class AuditInputError(ValueError):
    """Audit JSONL input is malformed."""

    def __init__(self, violations: list[Violation]):
        self.violations = violations
        summary = "; ".join(str(v) for v in violations[:3])
        super().__init__(f"Invalid audit input: {summary}")


def dumps_jsonl(entries: Iterable[AuditEntry]) -> str:
    """Serialize entries, one JSON object per line."""
    lines = [json.dumps(entry.to_dict(), sort_keys=True) for entry in entries]
    return "".join(f"{line}\n" for line in lines)


def loads_jsonl(text: str) -> list[AuditEntry]:
    """
    Parse JSON Lines into entries. Blank lines are skipped.

    Violation positions are 1-based line numbers.

    Raises:
        AuditInputError: a line is not JSON or not a valid entry
    """
    entries = []
    violations: list[Violation] = []

    for line_num, line in enumerate(text.splitlines(), 1):
        if not line.strip():
            continue

        try:
            data = json.loads(line)
        except json.JSONDecodeError as exc:
            violations.append(Violation(
                code=ErrorCode.INVALID_JSON,
                message=f"Line {line_num}: invalid JSON: {exc.msg}",
                position=line_num,
            ))
            continue

        try:
            entries.append(AuditEntry.model_validate(data, by_name=False))
        except ValidationError as exc:
            for violation in violations_from_pydantic(exc):
                violations.append(Violation(
                    code=violation.code,
                    message=f"Line {line_num}: {violation.message}",
                    position=line_num,
                    location=violation.location,
                ))

    if violations:
        raise AuditInputError(violations)
    return entries
