"""WorkspaceQuery facade: one snapshot call for the dashboard/API layer."""

from __future__ import annotations

import os
from collections.abc import Iterable

import structlog

from repograph.core.config import Settings
from repograph.dependencies.builder import DependencyGraphBuilder
from repograph.scanner.scanner import ProgressCallback, ProjectScanner
from repograph.workspace.schemas import (
    CycleSuggestionSchema,
    ProjectSchema,
    SnapshotStats,
    WorkspaceConfig,
    WorkspaceSnapshot,
)

log = structlog.get_logger("repograph.workspace")

RootsOrConfig = WorkspaceConfig | str | os.PathLike[str] | Iterable[str | os.PathLike[str]]


class WorkspaceQuery:
    """Facade over ProjectScanner and DependencyGraphBuilder.

    Callers only need::

        snapshot = WorkspaceQuery().query(["/home/me/src"])

    or, for a registered workspace::

        snapshot = WorkspaceQuery().query(WorkspaceConfig(root_dir="/ws", repos=["core", "api"]))
    """

    def __init__(
        self,
        scanner: ProjectScanner | None = None,
        builder: DependencyGraphBuilder | None = None,
        settings: Settings | None = None,
    ) -> None:
        if scanner is None or builder is None:
            settings = settings or Settings.from_env()
        self.scanner = scanner or ProjectScanner.from_settings(settings)
        self.builder = builder or DependencyGraphBuilder(scan_imports=settings.scan_imports)

    def query(
        self,
        source: RootsOrConfig,
        *,
        force: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> WorkspaceSnapshot:
        """Scan, build the dependency graph, and merge everything into a snapshot."""
        if isinstance(source, WorkspaceConfig):
            projects = self.scanner.scan_registered(
                source.root_dir, source.repos, force=force, on_progress=on_progress
            )
        else:
            if isinstance(source, (str, os.PathLike)):
                source = [source]
            projects = self.scanner.scan(source, force=force, on_progress=on_progress)

        graph = self.builder.build(projects)
        report = self.builder.detect_cycles()

        repos = [ProjectSchema.model_validate(graph.projects[p.path]) for p in projects]
        snapshot = WorkspaceSnapshot(
            repos=repos,
            by_path={repo.path: repo for repo in repos},
            # first project wins a name clash, as in the graph builder
            by_name={repo.name: repo for repo in reversed(repos)},
            dependency_graph=graph.to_adjacency(),
            dependency_order=self.builder.topological_order(),
            has_circular_deps=report.has_cycles,
            circular_deps=[list(cycle.nodes) for cycle in report.cycles],
            suggestions=[CycleSuggestionSchema.model_validate(s) for s in report.suggestions],
            cycle_visualization=report.visualization,
            diagram=self.builder.to_diagram(),
            stats=SnapshotStats(
                total_projects=len(repos),
                projects_with_manifest=sum(1 for repo in repos if repo.has_manifest),
                cycle_count=report.cycle_count,
                total_edges=graph.graph.edge_count,
            ),
        )
        log.info(
            "workspace.snapshot",
            projects=snapshot.stats.total_projects,
            cycles=snapshot.stats.cycle_count,
        )
        return snapshot

    def affected(self, project: str) -> list[str]:
        """Blast radius of *project* in the most recent query, sorted."""
        return sorted(self.builder.get_affected(project))
