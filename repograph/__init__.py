"""repograph: workspace project discovery and dependency graph analysis."""

__version__ = "0.1.0"

from repograph.dependencies import DependencyGraph, DependencyGraphBuilder
from repograph.exceptions import (
    GraphNotBuiltError,
    ProjectNotFoundError,
    RepoGraphError,
    UnknownNodeError,
)
from repograph.graph import CycleReport, DirectedGraph, detect_cycles, topological_order
from repograph.scanner import Project, ProjectScanner
from repograph.workspace import WorkspaceConfig, WorkspaceQuery, WorkspaceSnapshot

__all__ = [
    "CycleReport",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "DirectedGraph",
    "GraphNotBuiltError",
    "Project",
    "ProjectNotFoundError",
    "ProjectScanner",
    "RepoGraphError",
    "UnknownNodeError",
    "WorkspaceConfig",
    "WorkspaceQuery",
    "WorkspaceSnapshot",
    "detect_cycles",
    "topological_order",
]
