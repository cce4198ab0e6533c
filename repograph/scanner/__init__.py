"""Project scanner: discover projects and their metadata on disk."""

from repograph.scanner.cache import ScanCache
from repograph.scanner.classify import IGNORED_DIRS, classify_directory
from repograph.scanner.manifest import Manifest, parse_manifest, read_manifest
from repograph.scanner.models import (
    NOT_PROJECT,
    Classification,
    Phase,
    PhaseStatus,
    Project,
    ProjectMarker,
    RoadmapProgress,
    WorkspacePackage,
)
from repograph.scanner.roadmap import parse_roadmap, read_roadmap
from repograph.scanner.scanner import ProjectScanner, read_project

__all__ = [
    "IGNORED_DIRS",
    "NOT_PROJECT",
    "Classification",
    "Manifest",
    "Phase",
    "PhaseStatus",
    "Project",
    "ProjectMarker",
    "ProjectScanner",
    "RoadmapProgress",
    "ScanCache",
    "WorkspacePackage",
    "classify_directory",
    "parse_manifest",
    "parse_roadmap",
    "read_manifest",
    "read_project",
    "read_roadmap",
]
