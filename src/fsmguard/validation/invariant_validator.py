"""
Invariant Validator — Declarative global constraints over a definition.

Third validation gate. Each declared invariant is dispatched by kind:
1. terminal_states: listed states have no outbound transitions
2. required_transitions: listed (from, to[, action]) refs exist
3. forbidden_transitions: listed refs do not exist
4. forbidden_cycles: listed states are not on any cycle
5. self_transitions_required: listed states (or all states) have a self-loop

Any other kind is rejected. Violations from every invariant are
aggregated; the definition passes only when all invariants hold.

Assumes the definition already passed the structure validator.
"""

from collections.abc import Callable

from fsmguard.definition.models import FsmDefinition, FsmInvariant
from fsmguard.graph import TransitionGraph
from fsmguard.observability import get_logger, get_metrics
from fsmguard.results import ValidationResult, Violation
from fsmguard.vocabulary import ErrorCode, InvariantKind


logger = get_logger("validation.invariants")

InvariantRule = Callable[[int, FsmInvariant, FsmDefinition, TransitionGraph], list[Violation]]


# =============================================================================
# RULES
# =============================================================================

def check_terminal_states(
    index: int, invariant: FsmInvariant, definition: FsmDefinition, graph: TransitionGraph
) -> list[Violation]:
    errors = []
    for state in invariant.states:
        outbound = graph.out_degree(state)
        if outbound:
            errors.append(Violation(
                code=ErrorCode.TERMINAL_STATE_HAS_OUTBOUND,
                message=f"Terminal state '{state}' has {outbound} outbound transition(s)",
                state=state,
                invariant_index=index,
            ))
    return errors


def check_required_transitions(
    index: int, invariant: FsmInvariant, definition: FsmDefinition, graph: TransitionGraph
) -> list[Violation]:
    errors = []
    for ref in invariant.transitions:
        if not graph.has_edge(ref.from_state, ref.to_state, ref.action):
            errors.append(Violation(
                code=ErrorCode.MISSING_REQUIRED_TRANSITION,
                message=f"Required transition {ref.label()} is not declared",
                transition=ref.as_tuple(),
                invariant_index=index,
            ))
    return errors


def check_forbidden_transitions(
    index: int, invariant: FsmInvariant, definition: FsmDefinition, graph: TransitionGraph
) -> list[Violation]:
    errors = []
    for ref in invariant.transitions:
        if graph.has_edge(ref.from_state, ref.to_state, ref.action):
            errors.append(Violation(
                code=ErrorCode.FORBIDDEN_TRANSITION_PRESENT,
                message=f"Forbidden transition {ref.label()} is declared",
                transition=ref.as_tuple(),
                invariant_index=index,
            ))
    return errors


def check_forbidden_cycles(
    index: int, invariant: FsmInvariant, definition: FsmDefinition, graph: TransitionGraph
) -> list[Violation]:
    errors = []
    for state in invariant.states:
        if graph.is_on_cycle(state):
            errors.append(Violation(
                code=ErrorCode.CYCLE_DETECTED,
                message=f"State '{state}' lies on a cycle",
                state=state,
                invariant_index=index,
            ))
    return errors


def check_self_transitions_required(
    index: int, invariant: FsmInvariant, definition: FsmDefinition, graph: TransitionGraph
) -> list[Violation]:
    errors = []
    # Empty list means every declared state.
    states = invariant.states or definition.states
    for state in dict.fromkeys(states):
        if not graph.has_self_loop(state):
            errors.append(Violation(
                code=ErrorCode.MISSING_SELF_TRANSITION,
                message=f"State '{state}' has no self-transition",
                state=state,
                invariant_index=index,
            ))
    return errors


INVARIANT_RULES: dict[InvariantKind, InvariantRule] = {
    InvariantKind.TERMINAL_STATES: check_terminal_states,
    InvariantKind.REQUIRED_TRANSITIONS: check_required_transitions,
    InvariantKind.FORBIDDEN_TRANSITIONS: check_forbidden_transitions,
    InvariantKind.FORBIDDEN_CYCLES: check_forbidden_cycles,
    InvariantKind.SELF_TRANSITIONS_REQUIRED: check_self_transitions_required,
}


# =============================================================================
# INVARIANT VALIDATOR
# =============================================================================

class InvariantValidator:
    """
    Evaluates every declared invariant against one definition.

    Holds no state between calls; the graph is rebuilt per definition.
    """

    def __init__(self, rules: dict[InvariantKind, InvariantRule] | None = None):
        self._rules = dict(INVARIANT_RULES if rules is None else rules)

    def validate(self, definition: FsmDefinition) -> ValidationResult:
        errors: list[Violation] = []

        if definition.invariants:
            graph = TransitionGraph.from_definition(definition)
            for index, invariant in enumerate(definition.invariants):
                errors.extend(self._evaluate(index, invariant, definition, graph))

        if errors:
            get_metrics().invariant_violations.inc(len(errors))
            logger.info(f"Invariants violated: {[e.code.value for e in errors]}")
        else:
            logger.debug(f"{len(definition.invariants)} invariant(s) hold")

        return ValidationResult.from_violations(errors)

    def _evaluate(
        self,
        index: int,
        invariant: FsmInvariant,
        definition: FsmDefinition,
        graph: TransitionGraph,
    ) -> list[Violation]:
        kind = InvariantKind.parse(invariant.kind)
        rule = self._rules.get(kind) if kind is not None else None

        if rule is None:
            return [Violation(
                code=ErrorCode.UNKNOWN_INVARIANT_KIND,
                message=f"Invariant {index} has unsupported kind '{invariant.kind}'",
                invariant_index=index,
                location=f"invariants[{index}].kind",
            )]

        return rule(index, invariant, definition, graph)


def validate_invariants(definition: FsmDefinition) -> ValidationResult:
    """Evaluate all invariants of a structurally valid definition."""
    return InvariantValidator().validate(definition)


def create_invariant_validator() -> InvariantValidator:
    """Create a new invariant validator instance."""
    return InvariantValidator()
