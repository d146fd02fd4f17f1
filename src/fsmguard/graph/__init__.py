"""
Graph — Reachability primitives over the transition set.
"""

from fsmguard.graph.reachability import (
    Edge,
    TransitionGraph,
    build_graph,
)

__all__ = [
    "Edge",
    "TransitionGraph",
    "build_graph",
]
