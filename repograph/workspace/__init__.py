"""Workspace query facade: scan + dependency graph as one snapshot."""

from repograph.workspace.query import WorkspaceQuery
from repograph.workspace.schemas import (
    ProjectSchema,
    SnapshotStats,
    WorkspaceConfig,
    WorkspaceSnapshot,
)

__all__ = [
    "ProjectSchema",
    "SnapshotStats",
    "WorkspaceConfig",
    "WorkspaceQuery",
    "WorkspaceSnapshot",
]
