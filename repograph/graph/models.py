"""Data models for the generic graph core."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from repograph.exceptions import UnknownNodeError

NodeT = TypeVar("NodeT", bound=Hashable)


class DirectedGraph(Generic[NodeT]):
    """Directed graph with ordered nodes and a deduplicated edge set per node.

    An edge ``a -> b`` reads "a depends on b". Self-edges are kept.
    """

    def __init__(self, nodes: Iterable[NodeT] = ()) -> None:
        # dict values are used as ordered sets
        self._adjacency: dict[NodeT, dict[NodeT, None]] = {}
        for node in nodes:
            self.add_node(node)

    @classmethod
    def from_adjacency(cls, adjacency: dict[NodeT, Iterable[NodeT]]) -> DirectedGraph[NodeT]:
        """Build a graph from ``{node: [dependencies]}``; every target must be a key."""
        graph: DirectedGraph[NodeT] = cls(adjacency)
        for node, targets in adjacency.items():
            for target in targets:
                graph.add_edge(node, target)
        return graph

    def add_node(self, node: NodeT) -> None:
        self._adjacency.setdefault(node, {})

    def add_edge(self, source: NodeT, target: NodeT) -> bool:
        """Add ``source -> target``. Returns False when the edge already existed."""
        if source not in self._adjacency:
            raise UnknownNodeError(source)
        if target not in self._adjacency:
            raise UnknownNodeError(target)
        targets = self._adjacency[source]
        if target in targets:
            return False
        targets[target] = None
        return True

    @property
    def nodes(self) -> list[NodeT]:
        return list(self._adjacency)

    def successors(self, node: NodeT) -> list[NodeT]:
        if node not in self._adjacency:
            raise UnknownNodeError(node)
        return list(self._adjacency[node])

    def edges(self) -> Iterator[tuple[NodeT, NodeT]]:
        for source, targets in self._adjacency.items():
            for target in targets:
                yield source, target

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._adjacency.values())

    def has_edge(self, source: NodeT, target: NodeT) -> bool:
        return target in self._adjacency.get(source, {})

    def to_adjacency(self) -> dict[NodeT, list[NodeT]]:
        return {node: list(targets) for node, targets in self._adjacency.items()}

    def __contains__(self, node: object) -> bool:
        return node in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)

    def __repr__(self) -> str:
        return f"DirectedGraph(nodes={len(self)}, edges={self.edge_count})"


@dataclass(frozen=True)
class Edge(Generic[NodeT]):
    source: NodeT
    target: NodeT


@dataclass(frozen=True)
class Cycle(Generic[NodeT]):
    """A closed walk. ``nodes`` holds each member once; the walk returns to ``nodes[0]``."""

    nodes: tuple[NodeT, ...]

    @property
    def walk(self) -> list[NodeT]:
        return [*self.nodes, self.nodes[0]]

    def __len__(self) -> int:
        return len(self.nodes)

    def render(self, label: Callable[[NodeT], str] = str) -> str:
        return " -> ".join(label(node) for node in self.walk)


@dataclass
class CycleSuggestion(Generic[NodeT]):
    """Where to cut a cycle: drop the in-cycle edge that points at ``break_at``."""

    cycle_index: int
    break_at: NodeT
    remove_import: Edge[NodeT]
    external_dependents: int
    reason: str = "fewest dependents"


@dataclass
class CycleStats:
    total_nodes: int = 0
    total_edges: int = 0
    nodes_in_cycles: int = 0


@dataclass
class CycleReport(Generic[NodeT]):
    """Outcome of a cycle detection pass."""

    cycles: list[Cycle[NodeT]] = field(default_factory=list)
    suggestions: list[CycleSuggestion[NodeT]] = field(default_factory=list)
    visualization: str = ""
    stats: CycleStats = field(default_factory=CycleStats)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def cycle_count(self) -> int:
        return len(self.cycles)
