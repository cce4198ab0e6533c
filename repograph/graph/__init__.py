"""Generic directed-graph analysis: cycles, ordering, blast radius."""

from repograph.graph.algorithms import (
    NO_CYCLES_TEXT,
    detect_cycles,
    find_cycles,
    get_affected,
    reverse_edges,
    topological_order,
    visualize,
)
from repograph.graph.models import (
    Cycle,
    CycleReport,
    CycleStats,
    CycleSuggestion,
    DirectedGraph,
    Edge,
)

__all__ = [
    "NO_CYCLES_TEXT",
    "Cycle",
    "CycleReport",
    "CycleStats",
    "CycleSuggestion",
    "DirectedGraph",
    "Edge",
    "detect_cycles",
    "find_cycles",
    "get_affected",
    "reverse_edges",
    "topological_order",
    "visualize",
]
