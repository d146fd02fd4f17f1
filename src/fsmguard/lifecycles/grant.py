"""
Grant Lifecycle — Reference wrapper over the generic core.

A grant owns no transition logic of its own: every status change is an
AuditEntry recorded against GRANT_DEFINITION, and the status only moves
after the trail accepted the entry.
"""

from dataclasses import dataclass, field
from enum import Enum

from fsmguard.audit import AuditEntry, AuditTrail
from fsmguard.definition import FsmDefinition, parse_definition
from fsmguard.observability import get_logger
from fsmguard.results import ValidationResult, Violation
from fsmguard.vocabulary import ErrorCode


logger = get_logger("lifecycles.grant")


class GrantStatus(str, Enum):
    """Grant lifecycle states."""
    PENDING = "Pending"
    APPROVED = "Approved"
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    REJECTED = "Rejected"
    EXPIRED = "Expired"
    ARCHIVED = "Archived"


GRANT_DEFINITION_DOCUMENT = {
    "states": [status.value for status in GrantStatus],
    "transitions": [
        {"from": "Pending", "to": "Approved", "action": "approve",
         "metadata": {"description": "Committee approves the grant", "roles": ["committee"]}},
        {"from": "Pending", "to": "Rejected", "action": "reject",
         "metadata": {"roles": ["committee"]}},
        {"from": "Approved", "to": "Active", "action": "activate",
         "metadata": {"roles": ["mesh_lead"]}},
        {"from": "Approved", "to": "Suspended", "action": "suspend"},
        {"from": "Active", "to": "Completed", "action": "complete",
         "metadata": {"description": "Fully disbursed"}},
        {"from": "Active", "to": "Cancelled", "action": "cancel"},
        {"from": "Active", "to": "Suspended", "action": "suspend"},
        {"from": "Active", "to": "Expired", "action": "expire"},
        {"from": "Suspended", "to": "Active", "action": "resume"},
        {"from": "Suspended", "to": "Cancelled", "action": "cancel"},
        {"from": "Completed", "to": "Archived", "action": "archive"},
        {"from": "Cancelled", "to": "Archived", "action": "archive"},
        {"from": "Rejected", "to": "Archived", "action": "archive"},
        {"from": "Expired", "to": "Archived", "action": "archive"},
    ],
    "defaults": {"initialState": "Pending"},
    "invariants": [
        {"kind": "terminal_states", "states": ["Archived"],
         "description": "Archived grants are final"},
        {"kind": "forbidden_cycles", "states": ["Pending", "Completed", "Archived"]},
        {"kind": "required_transitions",
         "transitions": [{"from": "Pending", "to": "Approved", "action": "approve"}]},
        {"kind": "forbidden_transitions",
         "transitions": [{"from": "Rejected", "to": "Approved"}]},
    ],
}

GRANT_DEFINITION: FsmDefinition = parse_definition(GRANT_DEFINITION_DOCUMENT)


class LifecycleError(Exception):
    """A lifecycle move was refused by the core."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(str(result.first_error))


@dataclass
class Grant:
    """
    Grant whose status history lives in an audit trail.

    Several grants may share one trail; entries are keyed by grant id.
    """
    id: int
    total_amount: int
    disbursed_amount: int = 0
    status: GrantStatus = GrantStatus.PENDING
    trail: AuditTrail = field(default_factory=AuditTrail)
    definition: FsmDefinition = GRANT_DEFINITION

    def approve(self, actor: str, timestamp: int, metadata: str | None = None) -> None:
        self._move("approve", GrantStatus.APPROVED, actor, timestamp, metadata)

    def reject(self, actor: str, timestamp: int, metadata: str | None = None) -> None:
        self._move("reject", GrantStatus.REJECTED, actor, timestamp, metadata)

    def activate(self, actor: str, timestamp: int, metadata: str | None = None) -> None:
        self._move("activate", GrantStatus.ACTIVE, actor, timestamp, metadata)

    def suspend(self, actor: str, timestamp: int, metadata: str | None = None) -> None:
        self._move("suspend", GrantStatus.SUSPENDED, actor, timestamp, metadata)

    def resume(self, actor: str, timestamp: int, metadata: str | None = None) -> None:
        self._move("resume", GrantStatus.ACTIVE, actor, timestamp, metadata)

    def cancel(self, actor: str, timestamp: int, metadata: str | None = None) -> None:
        self._move("cancel", GrantStatus.CANCELLED, actor, timestamp, metadata)

    def expire(self, actor: str, timestamp: int, metadata: str | None = None) -> None:
        self._move("expire", GrantStatus.EXPIRED, actor, timestamp, metadata)

    def archive(self, actor: str, timestamp: int, metadata: str | None = None) -> None:
        self._move("archive", GrantStatus.ARCHIVED, actor, timestamp, metadata)

    @property
    def remaining_amount(self) -> int:
        return self.total_amount - self.disbursed_amount

    def disburse(self, amount: int, actor: str, timestamp: int) -> None:
        """
        Pay out part of the grant; completes it when fully disbursed.

        Raises:
            LifecycleError: the grant is not active
            ValueError: non-positive amount or more than what remains
        """
        if self.status != GrantStatus.ACTIVE:
            raise LifecycleError(ValidationResult.failure([Violation(
                code=ErrorCode.INVALID_STATE_TRANSITION,
                message=f"Grant {self.id}: cannot disburse while {self.status.value}",
                state=self.status.value,
                entity_id=str(self.id),
            )]))
        if amount <= 0:
            raise ValueError(f"Disbursement must be positive, got {amount}")
        if amount > self.remaining_amount:
            raise ValueError(
                f"Disbursement {amount} exceeds remaining {self.remaining_amount}"
            )

        if amount == self.remaining_amount:
            self._move("complete", GrantStatus.COMPLETED, actor, timestamp, f"disbursed {amount}")
        self.disbursed_amount += amount

    def _move(
        self,
        action: str,
        target: GrantStatus,
        actor: str,
        timestamp: int,
        metadata: str | None,
    ) -> None:
        entry = AuditEntry(
            entity_id=self.id,
            actor=actor,
            from_state=self.status.value,
            to_state=target.value,
            action=action,
            timestamp=timestamp,
            metadata=metadata,
        )
        result = self.trail.record(entry, self.definition)
        if not result.valid:
            logger.info(f"Grant {self.id}: {action} refused from {self.status.value}")
            raise LifecycleError(result)
        self.status = target
