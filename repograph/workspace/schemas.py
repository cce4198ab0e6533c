"""Workspace input and snapshot schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from repograph.scanner.models import PhaseStatus, ProjectMarker


class WorkspaceConfig(BaseModel):
    """Registered repos of a workspace: paths relative to ``root_dir``."""

    root_dir: str
    repos: list[str] = Field(default_factory=list)

    @field_validator("root_dir", mode="before")
    @classmethod
    def _strip_root(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @field_validator("repos", mode="before")
    @classmethod
    def _clean_repos(cls, v: list[str]) -> list[str]:
        if not isinstance(v, list):
            return v
        cleaned = [r.strip() if isinstance(r, str) else r for r in v]
        return [r for r in cleaned if r != ""]


class PhaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    number: int
    name: str
    status: PhaseStatus


class RoadmapProgressSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_phases: int = 0
    completed_phases: int = 0
    current_phase: int | None = None
    current_phase_name: str | None = None
    phases: list[PhaseSchema] = Field(default_factory=list)


class WorkspacePackageSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    path: str
    name: str
    version: str | None = None


class ProjectSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    path: str
    directory: str
    name: str
    marker: ProjectMarker
    version: str | None = None
    description: str | None = None
    has_tlc: bool = False
    has_planning: bool = False
    has_manifest: bool = False
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict)
    peer_dependencies: dict[str, str] = Field(default_factory=dict)
    workspace_deps: list[str] = Field(default_factory=list)
    imported_packages: list[str] = Field(default_factory=list)
    progress: RoadmapProgressSchema = Field(default_factory=RoadmapProgressSchema)
    is_monorepo: bool = False
    workspaces: list[WorkspacePackageSchema] = Field(default_factory=list)


class EdgeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source: str
    target: str


class CycleSuggestionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    cycle_index: int
    break_at: str
    remove_import: EdgeSchema
    external_dependents: int
    reason: str


class SnapshotStats(BaseModel):
    total_projects: int = 0
    projects_with_manifest: int = 0
    cycle_count: int = 0
    total_edges: int = 0


class WorkspaceSnapshot(BaseModel):
    """Everything the dashboard needs about a workspace, in one response shape.

    Collections are always present; an empty workspace yields empty ones.
    """

    repos: list[ProjectSchema] = Field(default_factory=list)
    by_path: dict[str, ProjectSchema] = Field(default_factory=dict)
    by_name: dict[str, ProjectSchema] = Field(default_factory=dict)
    dependency_graph: dict[str, list[str]] = Field(default_factory=dict)
    dependency_order: list[str] = Field(default_factory=list)
    has_circular_deps: bool = False
    circular_deps: list[list[str]] = Field(default_factory=list)
    suggestions: list[CycleSuggestionSchema] = Field(default_factory=list)
    cycle_visualization: str = ""
    diagram: str = ""
    stats: SnapshotStats = Field(default_factory=SnapshotStats)
