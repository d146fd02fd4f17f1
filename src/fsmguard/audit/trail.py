"""
Audit Trail — Append-only transition history with continuity checks.

Per entity the trail behaves like a two-state machine: NoHistory, then
At(state). An entry is accepted when:
- (with a definition) its (from, action, to) matches a declared transition
- its from_state equals the entity's last to_state, or, for the entity's
  first entry, the definition's initial state when one is declared

Entries of different entities may interleave freely.
"""

from collections.abc import Iterable, Iterator

from fsmguard.audit.record import AuditEntry, EntityId
from fsmguard.definition.models import FsmDefinition
from fsmguard.observability import LogContext, get_logger, get_metrics
from fsmguard.results import ValidationResult, Violation
from fsmguard.vocabulary import ErrorCode


logger = get_logger("audit.trail")


def check_entry(
    entry: AuditEntry,
    previous_state: str | None,
    position: int,
    definition: FsmDefinition | None = None,
) -> list[Violation]:
    """
    Apply the continuity rule to one entry.

    ``previous_state`` is None when the entity has no history yet.
    """
    errors = []
    transition = entry.transition_key()

    if definition is not None:
        if definition.find_transition(entry.from_state, entry.action, entry.to_state) is None:
            errors.append(Violation(
                code=ErrorCode.UNDECLARED_TRANSITION,
                message=(
                    f"Entity {entry.entity_id}: {entry.from_state} -({entry.action})-> "
                    f"{entry.to_state} is not a declared transition"
                ),
                transition=transition,
                entity_id=str(entry.entity_id),
                position=position,
            ))

    if previous_state is None:
        initial = definition.initial_state if definition is not None else None
        if initial is not None and entry.from_state != initial:
            errors.append(Violation(
                code=ErrorCode.INVALID_STATE_TRANSITION,
                message=(
                    f"Entity {entry.entity_id}: first entry starts at '{entry.from_state}', "
                    f"expected initial state '{initial}'"
                ),
                state=entry.from_state,
                transition=transition,
                entity_id=str(entry.entity_id),
                position=position,
            ))
    elif entry.from_state != previous_state:
        errors.append(Violation(
            code=ErrorCode.INVALID_STATE_TRANSITION,
            message=(
                f"Entity {entry.entity_id}: entry starts at '{entry.from_state}' "
                f"but history ends at '{previous_state}'"
            ),
            state=entry.from_state,
            transition=transition,
            entity_id=str(entry.entity_id),
            position=position,
        ))

    return errors


class AuditTrail:
    """
    In-memory, append-only audit trail.

    ``record`` mutates the trail; callers must serialize appends to one
    trail. Reading and ``verify`` never mutate.
    """

    def __init__(self):
        self._entries: list[AuditEntry] = []
        self._last_state: dict[EntityId, str] = {}

    @classmethod
    def from_entries(cls, entries: Iterable[AuditEntry]) -> "AuditTrail":
        """
        Build a trail from existing history without checking it.

        Use ``verify`` afterwards to validate the reloaded history.
        """
        trail = cls()
        for entry in entries:
            trail._append(entry)
        return trail

    @property
    def entries(self) -> tuple[AuditEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AuditEntry]:
        return iter(tuple(self._entries))

    def entries_for(self, entity_id: EntityId) -> tuple[AuditEntry, ...]:
        return tuple(e for e in self._entries if e.entity_id == entity_id)

    def entity_ids(self) -> list[EntityId]:
        """Entity ids in order of first appearance."""
        return list(dict.fromkeys(e.entity_id for e in self._entries))

    def last_state(self, entity_id: EntityId) -> str | None:
        """State the entity's history currently ends in, or None."""
        return self._last_state.get(entity_id)

    def record(
        self, entry: AuditEntry, definition: FsmDefinition | None = None
    ) -> ValidationResult:
        """
        Append ``entry`` if it continues its entity's history.

        On failure the trail is left unchanged.
        """
        metrics = get_metrics()
        position = len(self._entries)

        with LogContext(entry.entity_id):
            errors = check_entry(
                entry, self._last_state.get(entry.entity_id), position, definition
            )
            if errors:
                metrics.audit_entries_rejected.inc()
                logger.info(
                    f"Entry rejected at position {position}: {errors[0]}",
                    extra={"extra_data": {
                        "entity_id": entry.entity_id,
                        "position": position,
                        "code": errors[0].code.value,
                    }},
                )
                return ValidationResult.failure(errors)

            self._append(entry)
            metrics.audit_entries_recorded.inc()
            logger.debug(
                f"Recorded {entry.from_state} -({entry.action})-> {entry.to_state} "
                f"at position {position}"
            )

        return ValidationResult.success()

    def verify(self, definition: FsmDefinition | None = None) -> ValidationResult:
        """
        Re-walk the whole trail from a fresh history per entity.

        Violations carry entity id and trail position, in trail order.
        After a break the walk continues from the offending entry's
        to_state, so one break is reported once.
        """
        errors: list[Violation] = []
        last: dict[EntityId, str] = {}

        for position, entry in enumerate(self._entries):
            errors.extend(check_entry(entry, last.get(entry.entity_id), position, definition))
            last[entry.entity_id] = entry.to_state

        metrics = get_metrics()
        metrics.trails_verified.inc()
        if errors:
            metrics.trails_rejected.inc()
            logger.info(
                f"Trail verification failed: {len(errors)} violation(s), first: {errors[0]}",
                extra={"extra_data": {
                    "entity_id": errors[0].entity_id,
                    "position": errors[0].position,
                    "violations": len(errors),
                }},
            )
        else:
            logger.debug(f"Trail verified: {len(self._entries)} entries")

        return ValidationResult.from_violations(errors)

    def _append(self, entry: AuditEntry) -> None:
        self._entries.append(entry)
        self._last_state[entry.entity_id] = entry.to_state


def record_entry(
    trail: AuditTrail, entry: AuditEntry, definition: FsmDefinition | None = None
) -> ValidationResult:
    """Append an entry to a trail if it passes the continuity rule."""
    return trail.record(entry, definition)


def verify_trail(
    trail: AuditTrail, definition: FsmDefinition | None = None
) -> ValidationResult:
    """Verify a trail's continuity against an optional definition."""
    return trail.verify(definition)


def create_audit_trail() -> AuditTrail:
    """Create a new, empty audit trail."""
    return AuditTrail()
