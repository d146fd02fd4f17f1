"""
Transition Graph — Reachability queries over a definition's transitions.

Nodes are declared states, edges are transitions. Parallel edges are
kept and each edge carries its action label. Every query answers with a
boolean or a set, so results never depend on edge iteration order.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from fsmguard.definition.models import FsmDefinition, FsmTransition


@dataclass(frozen=True)
class Edge:
    """Directed, labelled edge."""
    source: str
    target: str
    action: str


@dataclass
class TransitionGraph:
    """
    Directed multigraph built from transitions.

    Traversals track visited nodes, so cyclic graphs always terminate in
    O(V + E).
    """
    nodes: frozenset[str] = field(default_factory=frozenset)
    _adjacency: dict[str, list[Edge]] = field(default_factory=dict)

    @classmethod
    def from_definition(cls, definition: FsmDefinition) -> "TransitionGraph":
        return cls.from_transitions(definition.states, definition.transitions)

    @classmethod
    def from_transitions(
        cls, states: Iterable[str], transitions: Iterable[FsmTransition]
    ) -> "TransitionGraph":
        adjacency: dict[str, list[Edge]] = {}
        nodes = set(states)
        for transition in transitions:
            edge = Edge(transition.from_state, transition.to_state, transition.action)
            adjacency.setdefault(edge.source, []).append(edge)
            nodes.add(edge.source)
            nodes.add(edge.target)
        return cls(nodes=frozenset(nodes), _adjacency=adjacency)

    def edges_from(self, state: str) -> tuple[Edge, ...]:
        return tuple(self._adjacency.get(state, ()))

    def out_degree(self, state: str) -> int:
        return len(self._adjacency.get(state, ()))

    def has_edge(self, source: str, target: str, action: str | None = None) -> bool:
        """Check for a direct edge; ``action`` is compared only when given."""
        for edge in self._adjacency.get(source, ()):
            if edge.target == target and (action is None or edge.action == action):
                return True
        return False

    def has_self_loop(self, state: str) -> bool:
        return self.has_edge(state, state)

    def reachable_from(self, state: str) -> frozenset[str]:
        """States reachable from ``state`` by a non-empty path."""
        visited: set[str] = set()
        stack = [edge.target for edge in self._adjacency.get(state, ())]

        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)
            stack.extend(edge.target for edge in self._adjacency.get(current, ()))

        return frozenset(visited)

    def has_path(self, source: str, target: str) -> bool:
        """True iff a non-empty sequence of edges leads from source to target."""
        visited: set[str] = set()
        stack = [edge.target for edge in self._adjacency.get(source, ())]

        while stack:
            current = stack.pop()
            if current == target:
                return True
            if current in visited:
                continue
            visited.add(current)
            stack.extend(edge.target for edge in self._adjacency.get(current, ()))

        return False

    def is_on_cycle(self, state: str) -> bool:
        """True iff ``state`` can reach itself; a self-loop counts."""
        return self.has_path(state, state)


def build_graph(definition: FsmDefinition) -> TransitionGraph:
    """Build the transition graph for a definition."""
    return TransitionGraph.from_definition(definition)
