"""
Definition Models — In-memory representation of a declarative FSM.

Pure data: states, transitions, defaults and invariants exactly as given.
Nothing here validates references; duplicate states and undocumented
properties are stored so the structural validator can report them.
"""

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field


_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="allow",
    validate_by_name=True,
    validate_by_alias=True,
)


class FsmTransitionMetadata(BaseModel):
    """Descriptive metadata attached to a transition."""
    model_config = _MODEL_CONFIG

    description: str | None = Field(default=None, description="Human-readable note")
    roles: tuple[str, ...] = Field(
        default=(),
        description="Roles expected to perform the action (informational)"
    )


class FsmTransition(BaseModel):
    """
    One declared edge of the state graph.

    Several transitions may share source, target or action.
    """
    model_config = _MODEL_CONFIG

    from_state: str = Field(..., alias="from", description="Source state")
    to_state: str = Field(..., alias="to", description="Target state")
    action: str = Field(..., description="Action label performing the move")
    guard: str | None = Field(default=None, description="Opaque guard expression")
    metadata: FsmTransitionMetadata | None = Field(default=None)

    @property
    def is_self_loop(self) -> bool:
        return self.from_state == self.to_state

    def key(self) -> tuple[str, str, str]:
        return (self.from_state, self.to_state, self.action)


class FsmTransitionRef(BaseModel):
    """Reference to a transition inside an invariant; action is optional."""
    model_config = _MODEL_CONFIG

    from_state: str = Field(..., alias="from")
    to_state: str = Field(..., alias="to")
    action: str | None = Field(default=None)

    def label(self) -> str:
        if self.action is None:
            return f"{self.from_state} -> {self.to_state}"
        return f"{self.from_state} -({self.action})-> {self.to_state}"

    def as_tuple(self) -> tuple[str, ...]:
        if self.action is None:
            return (self.from_state, self.to_state)
        return (self.from_state, self.to_state, self.action)


class FsmDefaults(BaseModel):
    """Definition-wide defaults."""
    model_config = _MODEL_CONFIG

    initial_state: str | None = Field(default=None, alias="initialState")


class FsmInvariant(BaseModel):
    """
    Declarative global constraint.

    ``kind`` is kept as a raw string so unsupported kinds survive parsing
    and are rejected by the invariant evaluator instead of being dropped.
    """
    model_config = _MODEL_CONFIG

    kind: str = Field(..., description="Invariant kind")
    states: tuple[str, ...] = Field(default=())
    transitions: tuple[FsmTransitionRef, ...] = Field(default=())
    description: str | None = Field(default=None)


class FsmDefinition(BaseModel):
    """
    Complete FSM definition.

    Immutable once constructed. Callers own it; validators only read it.
    """
    model_config = _MODEL_CONFIG

    states: tuple[str, ...] = Field(..., description="Declared states in order")
    transitions: tuple[FsmTransition, ...] = Field(..., description="Declared transitions")
    defaults: FsmDefaults | None = Field(default=None)
    invariants: tuple[FsmInvariant, ...] = Field(default=())

    @property
    def initial_state(self) -> str | None:
        if self.defaults is None:
            return None
        return self.defaults.initial_state

    def is_declared(self, state: str) -> bool:
        """Check whether ``state`` appears in ``states``."""
        return state in self.states

    def transitions_from(self, state: str) -> tuple[FsmTransition, ...]:
        """Outbound transitions of ``state`` in declaration order."""
        return tuple(t for t in self.transitions if t.from_state == state)

    def find_transition(
        self, from_state: str, action: str, to_state: str
    ) -> FsmTransition | None:
        """First transition matching the exact (from, action, to) triple."""
        for transition in self.transitions:
            if transition.key() == (from_state, to_state, action):
                return transition
        return None

    def unknown_fields(self) -> Iterator[tuple[str, str]]:
        """
        Yield ``(location, name)`` for every undocumented property.

        Locations use the wire layout, e.g. ``transitions[2].metadata``.
        """
        yield from _extra_names("", self)
        if self.defaults is not None:
            yield from _extra_names("defaults", self.defaults)
        for index, transition in enumerate(self.transitions):
            location = f"transitions[{index}]"
            yield from _extra_names(location, transition)
            if transition.metadata is not None:
                yield from _extra_names(f"{location}.metadata", transition.metadata)
        for index, invariant in enumerate(self.invariants):
            location = f"invariants[{index}]"
            yield from _extra_names(location, invariant)
            for ref_index, ref in enumerate(invariant.transitions):
                yield from _extra_names(f"{location}.transitions[{ref_index}]", ref)

    def to_document(self) -> dict:
        """Wire-format dict (aliases, no empty optionals)."""
        return self.model_dump(by_alias=True, exclude_none=True)


def _extra_names(location: str, model: BaseModel) -> Iterator[tuple[str, str]]:
    for name in (model.model_extra or {}):
        yield location, name
