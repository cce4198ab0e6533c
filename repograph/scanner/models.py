"""Data models for discovered projects."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class ProjectMarker(str, enum.Enum):
    """Which classification rule made a directory a project."""

    TLC_CONFIG = "tlc_config"  # .tlc.json
    PLANNING = "planning"  # .planning/
    MANIFEST_AND_VCS = "manifest_and_vcs"  # package.json + .git
    REGISTERED = "registered"  # listed in a workspace config


@dataclass(frozen=True)
class Classification:
    """Closed result of classifying one directory: a project (with marker) or not."""

    marker: ProjectMarker | None = None

    @property
    def is_project(self) -> bool:
        return self.marker is not None


NOT_PROJECT = Classification()


class PhaseStatus(str, enum.Enum):
    DONE = "done"
    IN_PROGRESS = "in_progress"
    PENDING = "pending"


@dataclass
class Phase:
    number: int
    name: str
    status: PhaseStatus


@dataclass
class RoadmapProgress:
    """Phase progress parsed from a roadmap document."""

    total_phases: int = 0
    completed_phases: int = 0
    current_phase: int | None = None
    current_phase_name: str | None = None
    phases: list[Phase] = field(default_factory=list)


@dataclass
class WorkspacePackage:
    """A monorepo sub-package matched by a ``workspaces`` glob."""

    path: str
    name: str
    version: str | None = None


@dataclass
class Project:
    """A discovered project.

    ``path`` is the identity: an absolute directory in discovery mode, a
    workspace-relative repo path for registered repos. ``directory`` is
    always the absolute on-disk location.
    """

    path: str
    directory: str
    name: str
    marker: ProjectMarker
    version: str | None = None
    description: str | None = None
    has_tlc: bool = False
    has_planning: bool = False
    has_manifest: bool = False
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    peer_dependencies: dict[str, str] = field(default_factory=dict)
    workspace_deps: list[str] = field(default_factory=list)
    imported_packages: list[str] = field(default_factory=list)
    progress: RoadmapProgress = field(default_factory=RoadmapProgress)
    is_monorepo: bool = False
    workspaces: list[WorkspacePackage] = field(default_factory=list)

    @property
    def all_dependencies(self) -> dict[str, str]:
        """Declared dependencies across all sections, ``dependencies`` first and winning clashes."""
        merged = dict(self.dependencies)
        for section in (self.dev_dependencies, self.peer_dependencies):
            for name, spec in section.items():
                merged.setdefault(name, spec)
        return merged
