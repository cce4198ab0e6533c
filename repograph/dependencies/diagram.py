"""Mermaid flowchart rendering for dependency graphs."""

from __future__ import annotations

import re
from collections.abc import Mapping

from repograph.graph import DirectedGraph

_UNSAFE_ID_RE = re.compile(r"[^A-Za-z0-9_]")


def mermaid_safe_id(node_id: str) -> str:
    return _UNSAFE_ID_RE.sub("_", node_id)


def _label(text: str) -> str:
    return text.replace('"', "#quot;")


def render_mermaid(
    graph: DirectedGraph[str],
    labels: Mapping[str, str] | None = None,
    direction: str = "TD",
) -> str:
    """``graph TD`` text: one node line per node, then one ``a --> b`` per edge.

    Output order follows node insertion order, so equal graphs render equal text.
    """
    labels = labels or {}
    lines = [f"graph {direction}"]
    for node in graph.nodes:
        lines.append(f'    {mermaid_safe_id(node)}["{_label(labels.get(node, node))}"]')
    for source, target in graph.edges():
        lines.append(f"    {mermaid_safe_id(source)} --> {mermaid_safe_id(target)}")
    return "\n".join(lines)
