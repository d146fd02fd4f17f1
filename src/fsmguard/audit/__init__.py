"""
Audit — Transition histories and their continuity verification.

Provides:
- AuditEntry: immutable record of one transition
- AuditTrail: append-only trail with record/verify
- JSONL codec for interchange
"""

from fsmguard.audit.record import (
    AuditEntry,
    EntityId,
)
from fsmguard.audit.trail import (
    AuditTrail,
    check_entry,
    record_entry,
    verify_trail,
    create_audit_trail,
)
from fsmguard.audit.codec import (
    AuditInputError,
    dumps_jsonl,
    loads_jsonl,
)

__all__ = [
    # Records
    "AuditEntry",
    "EntityId",
    # Trail
    "AuditTrail",
    "check_entry",
    "record_entry",
    "verify_trail",
    "create_audit_trail",
    # Codec
    "AuditInputError",
    "dumps_jsonl",
    "loads_jsonl",
]
