"""Tests for the transition graph."""

import pytest

from fsmguard.graph import Edge, TransitionGraph, build_graph


@pytest.fixture
def graph(make_definition) -> TransitionGraph:
    # A -> B -> C -> B, D isolated, E self-loop
    return build_graph(make_definition(
        ["A", "B", "C", "D", "E"],
        [("A", "B", "go"), ("B", "C", "next"), ("C", "B", "back"), ("E", "E", "stay")],
    ))


class TestTransitionGraph:
    """Tests for graph queries."""

    def test_nodes_include_declared_states(self, graph):
        assert graph.nodes == frozenset({"A", "B", "C", "D", "E"})

    def test_edges_from(self, graph):
        assert graph.edges_from("A") == (Edge("A", "B", "go"),)
        assert graph.edges_from("D") == ()

    def test_out_degree(self, graph):
        assert graph.out_degree("B") == 1
        assert graph.out_degree("D") == 0
        assert graph.out_degree("unknown") == 0

    def test_has_edge_with_and_without_action(self, graph):
        assert graph.has_edge("A", "B")
        assert graph.has_edge("A", "B", "go")
        assert not graph.has_edge("A", "B", "other")
        assert not graph.has_edge("B", "A")

    def test_reachable_from(self, graph):
        assert graph.reachable_from("A") == frozenset({"B", "C"})
        assert graph.reachable_from("D") == frozenset()

    def test_reachable_excludes_start_without_cycle(self, graph):
        assert "A" not in graph.reachable_from("A")
        assert "B" in graph.reachable_from("B")

    def test_has_path_requires_edges(self, graph):
        assert graph.has_path("A", "C")
        assert not graph.has_path("C", "A")
        assert not graph.has_path("D", "D")

    def test_is_on_cycle(self, graph):
        assert graph.is_on_cycle("B")
        assert graph.is_on_cycle("C")
        assert not graph.is_on_cycle("A")
        assert not graph.is_on_cycle("D")

    def test_self_loop_is_a_cycle(self, graph):
        assert graph.has_self_loop("E")
        assert graph.is_on_cycle("E")
        assert not graph.has_self_loop("B")

    def test_parallel_edges_are_kept(self, make_definition):
        graph = build_graph(make_definition(["A", "B"], [("A", "B", "x"), ("A", "B", "y")]))
        assert graph.out_degree("A") == 2
        assert graph.has_edge("A", "B", "y")

    def test_long_chain_terminates(self):
        states = [f"S{i}" for i in range(5000)]
        graph = TransitionGraph.from_transitions(states, [])
        assert graph.reachable_from("S0") == frozenset()

    def test_deep_cycle_without_recursion_limit(self, make_definition):
        states = [f"S{i}" for i in range(3000)]
        transitions = [(states[i], states[(i + 1) % len(states)], "next") for i in range(len(states))]
        graph = build_graph(make_definition(states, transitions))
        assert graph.is_on_cycle("S0")
        assert len(graph.reachable_from("S0")) == len(states)
