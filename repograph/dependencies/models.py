"""Data models for the dependency graph builder."""

from __future__ import annotations

from dataclasses import dataclass, field

from repograph.graph import DirectedGraph, reverse_edges
from repograph.scanner.models import Project


@dataclass
class DependencyGraph:
    """Projects plus their "depends on" edges, keyed by project identity."""

    graph: DirectedGraph[str]
    projects: dict[str, Project] = field(default_factory=dict)
    ids_by_name: dict[str, str] = field(default_factory=dict)
    _reverse: dict[str, list[str]] | None = field(default=None, init=False, repr=False)

    @property
    def reverse(self) -> dict[str, list[str]]:
        """Dependents adjacency, computed once."""
        if self._reverse is None:
            self._reverse = reverse_edges(self.graph)
        return self._reverse

    @property
    def nodes(self) -> list[str]:
        return self.graph.nodes

    def dependencies_of(self, project_id: str) -> list[str]:
        return self.graph.successors(project_id)

    def to_adjacency(self) -> dict[str, list[str]]:
        return self.graph.to_adjacency()

    def label(self, project_id: str) -> str:
        project = self.projects.get(project_id)
        return project.name if project is not None else project_id
