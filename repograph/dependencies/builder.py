"""DependencyGraphBuilder: turn scanned projects into a project dependency graph."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Iterable
from pathlib import Path

import structlog

from repograph.dependencies.diagram import render_mermaid
from repograph.dependencies.imports import SOURCE_EXTENSIONS, scan_imported_packages
from repograph.dependencies.models import DependencyGraph
from repograph.exceptions import GraphNotBuiltError, ProjectNotFoundError
from repograph.graph import (
    CycleReport,
    DirectedGraph,
    detect_cycles,
    get_affected,
    topological_order,
)
from repograph.scanner.manifest import FILE_PROTOCOL, WORKSPACE_PROTOCOL
from repograph.scanner.models import Project

log = structlog.get_logger("repograph.dependencies")


class DependencyGraphBuilder:
    """Build and query the "project depends on project" graph.

    Edges come from manifest dependencies whose spec is ``workspace:`` or
    ``file:``, plus, when *scan_imports* is on, from packages imported in
    each project's source tree. Only projects in the given set become
    nodes; references to anything else are dropped. Cycle detection and
    ordering are delegated to :mod:`repograph.graph`.

    Usage::

        builder = DependencyGraphBuilder()
        builder.build(scanner.scan(["/work"]))
        builder.topological_order()
        builder.get_affected("@acme/core")
    """

    def __init__(
        self,
        scan_imports: bool = False,
        source_extensions: Iterable[str] = SOURCE_EXTENSIONS,
    ) -> None:
        self.scan_imports = scan_imports
        self.source_extensions = tuple(source_extensions)
        self._graph: DependencyGraph | None = None

    # ── build ────────────────────────────────────────────────────────────

    def build(self, projects: Iterable[Project]) -> DependencyGraph:
        """Assemble the graph. Replaces any previously built graph."""
        by_id: dict[str, Project] = {}
        ids_by_name: dict[str, str] = {}
        ids_by_dir: dict[str, str] = {}

        for project in projects:
            if project.path in by_id:
                continue
            by_id[project.path] = project
            ids_by_dir.setdefault(os.path.realpath(project.directory), project.path)
            if project.name in ids_by_name:
                log.warning(
                    "graph.duplicate_name",
                    name=project.name,
                    kept=ids_by_name[project.name],
                    ignored=project.path,
                )
                continue
            ids_by_name[project.name] = project.path

        if self.scan_imports:
            by_id = {
                pid: self._with_imports(project, ids_by_name) for pid, project in by_id.items()
            }

        graph: DirectedGraph[str] = DirectedGraph(by_id)
        for pid, project in by_id.items():
            for target in self._manifest_targets(project, ids_by_name, ids_by_dir):
                graph.add_edge(pid, target)
            for package in project.imported_packages:
                target = ids_by_name.get(package)
                if target is None:
                    log.debug("graph.unresolved_import", project=pid, package=package)
                    continue
                graph.add_edge(pid, target)

        self._graph = DependencyGraph(graph=graph, projects=by_id, ids_by_name=ids_by_name)
        log.info(
            "graph.built",
            projects=len(graph),
            edges=graph.edge_count,
            scan_imports=self.scan_imports,
        )
        return self._graph

    def _manifest_targets(
        self,
        project: Project,
        ids_by_name: dict[str, str],
        ids_by_dir: dict[str, str],
    ) -> list[str]:
        targets: list[str] = []
        for name, spec in project.all_dependencies.items():
            target: str | None = None
            if spec.startswith(FILE_PROTOCOL):
                relative = spec[len(FILE_PROTOCOL) :]
                resolved = os.path.realpath(os.path.join(project.directory, relative))
                target = ids_by_dir.get(resolved) or ids_by_name.get(name)
            elif spec.startswith(WORKSPACE_PROTOCOL):
                target = ids_by_name.get(name)
            else:
                continue

            if target is None:
                log.debug("graph.unresolved_local_dep", project=project.path, dep=name, spec=spec)
                continue
            targets.append(target)
        return targets

    def _with_imports(self, project: Project, ids_by_name: dict[str, str]) -> Project:
        imported = scan_imported_packages(Path(project.directory), self.source_extensions)
        known = sorted(imported & ids_by_name.keys())
        return dataclasses.replace(project, imported_packages=known)

    # ── queries ──────────────────────────────────────────────────────────

    @property
    def graph(self) -> DependencyGraph:
        if self._graph is None:
            raise GraphNotBuiltError("call build() before querying the dependency graph")
        return self._graph

    def resolve(self, project: str) -> str:
        """Map a project identity or declared name to its identity."""
        graph = self.graph
        if project in graph.projects:
            return project
        if project in graph.ids_by_name:
            return graph.ids_by_name[project]
        raise ProjectNotFoundError(project)

    def get_dependencies(self, project: str) -> list[str]:
        """Projects *project* depends on directly."""
        return self.graph.dependencies_of(self.resolve(project))

    def get_dependents(self, project: str) -> list[str]:
        """Projects that depend on *project* directly."""
        return list(self.graph.reverse[self.resolve(project)])

    def get_affected(self, project: str) -> set[str]:
        """Everything that must be re-verified when *project* changes."""
        return get_affected(self.resolve(project), self.graph.reverse)

    def topological_order(self) -> list[str]:
        return topological_order(self.graph.graph)

    def detect_cycles(self) -> CycleReport[str]:
        graph = self.graph
        return detect_cycles(graph.graph, label=graph.label)

    def to_diagram(self) -> str:
        graph = self.graph
        labels = {pid: project.name for pid, project in graph.projects.items()}
        return render_mermaid(graph.graph, labels)
