"""
Audit Entry — Immutable record of one transition of one process entity.

Timestamps are opaque integers supplied by the caller.
"""

from pydantic import BaseModel, ConfigDict, Field


EntityId = str | int


class AuditEntry(BaseModel):
    """
    One recorded transition.

    Interchange names: entityId, actor, from_state, to_state, action,
    timestamp, metadata.
    """
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_by_name=True,
        validate_by_alias=True,
    )

    entity_id: EntityId = Field(..., alias="entityId", description="Process entity identifier")
    actor: str = Field(..., description="Who performed the action")
    from_state: str = Field(..., description="State before the transition")
    to_state: str = Field(..., description="State after the transition")
    action: str = Field(..., description="Action label")
    timestamp: int = Field(..., strict=True, description="Caller-supplied time value")
    metadata: str | None = Field(default=None, description="Free-form note")

    def transition_key(self) -> tuple[str, str, str]:
        return (self.from_state, self.to_state, self.action)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
