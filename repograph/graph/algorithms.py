"""Cycle detection, topological ordering and reverse reachability.

All traversals are iterative and visit nodes in graph insertion order, so
results are deterministic for a given graph and terminate on any finite
input, cyclic or not.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Mapping

from repograph.graph.models import (
    Cycle,
    CycleReport,
    CycleStats,
    CycleSuggestion,
    DirectedGraph,
    Edge,
    NodeT,
)

_ON_STACK = 1
_FINISHED = 2

NO_CYCLES_TEXT = "No circular dependencies"


def _depth_first(
    graph: DirectedGraph[NodeT],
    on_back_edge: Callable[[list[NodeT], int], None] | None = None,
) -> list[NodeT]:
    """Single DFS pass over the whole graph; returns nodes in post-order.

    ``on_back_edge(stack, index)`` is called for every edge into a node that
    is still on the stack, with ``index`` the position of that node.
    """
    state: dict[NodeT, int] = {}
    postorder: list[NodeT] = []

    for root in graph.nodes:
        if root in state:
            continue
        state[root] = _ON_STACK
        stack: list[NodeT] = [root]
        position: dict[NodeT, int] = {root: 0}
        pending = [iter(graph.successors(root))]

        while pending:
            node = stack[-1]
            for succ in pending[-1]:
                succ_state = state.get(succ)
                if succ_state is None:
                    state[succ] = _ON_STACK
                    position[succ] = len(stack)
                    stack.append(succ)
                    pending.append(iter(graph.successors(succ)))
                    break
                if succ_state == _ON_STACK and on_back_edge is not None:
                    on_back_edge(stack, position[succ])
            else:
                state[node] = _FINISHED
                postorder.append(node)
                stack.pop()
                pending.pop()
                del position[node]

    return postorder


def find_cycles(graph: DirectedGraph[NodeT]) -> list[Cycle[NodeT]]:
    """Cycles closed by back-edges of one DFS pass.

    Every cyclic strongly connected region yields at least one cycle, but
    when several simple cycles share nodes not all of them are listed.
    """
    cycles: list[Cycle[NodeT]] = []

    def record(stack: list[NodeT], index: int) -> None:
        cycles.append(Cycle(tuple(stack[index:])))

    _depth_first(graph, on_back_edge=record)
    return cycles


def topological_order(graph: DirectedGraph[NodeT]) -> list[NodeT]:
    """Dependencies before dependents.

    On cyclic input the edge closing each cycle is ignored: the cycle member
    reached first (in node insertion order) is emitted after the others.
    The result is always a permutation of ``graph.nodes``.
    """
    return _depth_first(graph)


def reverse_edges(graph: DirectedGraph[NodeT]) -> dict[NodeT, list[NodeT]]:
    """Dependents adjacency: ``{node: [nodes that depend on it]}``."""
    reverse: dict[NodeT, list[NodeT]] = {node: [] for node in graph.nodes}
    for source, target in graph.edges():
        reverse[target].append(source)
    return reverse


def get_affected(node: NodeT, reverse: Mapping[NodeT, Iterable[NodeT]]) -> set[NodeT]:
    """Everything that transitively depends on *node*, excluding *node* itself."""
    affected: set[NodeT] = set()
    queue: deque[NodeT] = deque([node])
    while queue:
        current = queue.popleft()
        for dependent in reverse.get(current, ()):
            if dependent != node and dependent not in affected:
                affected.add(dependent)
                queue.append(dependent)
    return affected


def suggest_break(
    index: int,
    cycle: Cycle[NodeT],
    reverse: Mapping[NodeT, Iterable[NodeT]],
) -> CycleSuggestion[NodeT]:
    """Pick the member with the fewest dependents outside the cycle."""
    members = set(cycle.nodes)
    best_pos = 0
    best_score: int | None = None
    for pos, node in enumerate(cycle.nodes):
        score = sum(1 for dep in reverse.get(node, ()) if dep not in members)
        if best_score is None or score < best_score:
            best_pos, best_score = pos, score

    target = cycle.nodes[best_pos]
    source = cycle.nodes[best_pos - 1]
    return CycleSuggestion(
        cycle_index=index,
        break_at=target,
        remove_import=Edge(source, target),
        external_dependents=best_score or 0,
    )


def visualize(cycles: list[Cycle[NodeT]], label: Callable[[NodeT], str] = str) -> str:
    if not cycles:
        return NO_CYCLES_TEXT
    lines = [f"Cycle {i}: {cycle.render(label)}" for i, cycle in enumerate(cycles, start=1)]
    involved = len({node for cycle in cycles for node in cycle.nodes})
    lines.append(f"Total: {len(cycles)} cycle(s), {involved} node(s) involved")
    return "\n".join(lines)


def detect_cycles(
    graph: DirectedGraph[NodeT],
    label: Callable[[NodeT], str] = str,
) -> CycleReport[NodeT]:
    """Full cycle analysis: cycles, break suggestions, text rendering and stats.

    A cycle is a reported condition, never an exception.
    """
    cycles = find_cycles(graph)
    reverse = reverse_edges(graph)
    return CycleReport(
        cycles=cycles,
        suggestions=[suggest_break(i, cycle, reverse) for i, cycle in enumerate(cycles)],
        visualization=visualize(cycles, label),
        stats=CycleStats(
            total_nodes=len(graph),
            total_edges=graph.edge_count,
            nodes_in_cycles=len({node for cycle in cycles for node in cycle.nodes}),
        ),
    )
