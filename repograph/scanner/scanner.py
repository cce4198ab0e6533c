"""ProjectScanner: recursive project discovery under one or more roots."""

from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterable
from pathlib import Path

import structlog

from repograph.core.config import DEFAULT_CACHE_TTL, DEFAULT_SCAN_DEPTH, Settings
from repograph.scanner.cache import ScanCache
from repograph.scanner.classify import (
    PLANNING_DIR,
    ROADMAP_FILE,
    TLC_CONFIG_FILE,
    classify_directory,
    is_ignored,
)
from repograph.scanner.manifest import is_local_spec, read_manifest, resolve_workspaces
from repograph.scanner.models import Project, ProjectMarker, RoadmapProgress
from repograph.scanner.roadmap import read_roadmap

log = structlog.get_logger("repograph.scanner")

ProgressCallback = Callable[[int], None]
PathLike = str | os.PathLike[str]


def read_project(
    directory: PathLike,
    *,
    marker: ProjectMarker,
    identity: str | None = None,
    default_name: str | None = None,
) -> Project:
    """Build a :class:`Project` from whatever metadata *directory* holds.

    Name falls back to *default_name*, then the directory basename. A
    malformed manifest leaves the defaults in place.
    """
    root = Path(directory)
    abs_dir = os.fspath(root)
    project = Project(
        path=identity or abs_dir,
        directory=abs_dir,
        name=default_name or root.name,
        marker=marker,
        has_tlc=(root / TLC_CONFIG_FILE).is_file(),
        has_planning=(root / PLANNING_DIR).is_dir(),
    )

    manifest = read_manifest(root)
    if manifest is not None:
        project.has_manifest = manifest.parsed
        project.name = manifest.name or project.name
        project.version = manifest.version
        project.description = manifest.description
        project.dependencies = manifest.dependencies
        project.dev_dependencies = manifest.dev_dependencies
        project.peer_dependencies = manifest.peer_dependencies
        project.workspace_deps = [
            name for name, spec in project.all_dependencies.items() if is_local_spec(spec)
        ]
        if manifest.workspace_globs is not None:
            project.is_monorepo = True
            project.workspaces = resolve_workspaces(root, manifest.workspace_globs)

    if project.has_planning:
        project.progress = read_roadmap(root / PLANNING_DIR / ROADMAP_FILE)
    else:
        project.progress = RoadmapProgress()

    return project


def _sort_key(project: Project) -> tuple[str, str]:
    return (project.name.casefold(), project.path)


def _outer_first(root: str) -> tuple[int, str]:
    return (root.count(os.sep), root)


def _inside_project(directory: str, found: dict[str, Project]) -> bool:
    """True when a strict ancestor of *directory* is already a discovered project."""
    child, parent = directory, os.path.dirname(directory)
    while parent != child:
        if parent in found:
            return True
        child, parent = parent, os.path.dirname(parent)
    return False


class ProjectScanner:
    """Discover projects below a set of root directories.

    A directory is a project when it carries ``.tlc.json``, a ``.planning/``
    directory, or both ``package.json`` and ``.git``. Once a directory is a
    project its subtree is not searched for further projects; other
    directories are recursed into up to *scan_depth* levels below a root.

    Results are cached for *cache_ttl* seconds. Not safe for concurrent
    ``scan()`` calls on one instance; the cache slot itself is locked.
    """

    def __init__(
        self,
        scan_depth: int = DEFAULT_SCAN_DEPTH,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if scan_depth < 0:
            raise ValueError(f"scan_depth must be >= 0, got {scan_depth}")
        self.scan_depth = scan_depth
        self._cache: ScanCache[list[Project]] = ScanCache(cache_ttl, clock)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> ProjectScanner:
        settings = settings or Settings.from_env()
        return cls(scan_depth=settings.scan_depth, cache_ttl=settings.cache_ttl, clock=clock)

    @property
    def cache(self) -> ScanCache[list[Project]]:
        return self._cache

    def invalidate(self) -> None:
        self._cache.invalidate()

    # ── discovery mode ───────────────────────────────────────────────────

    def scan(
        self,
        roots: Iterable[PathLike],
        *,
        force: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> list[Project]:
        """Scan *roots* and return the projects found, sorted by name.

        Within the cache TTL the previous result for the same roots is
        returned without touching the filesystem, unless *force* is set.
        *on_progress* receives the running count of discovered projects.
        """
        normalized = tuple(os.path.realpath(os.fspath(root)) for root in roots)
        key = ("scan", normalized)

        if not force:
            cached = self._cache.get(key)
            if cached is not None:
                log.debug("scanner.cache_hit", roots=len(normalized), projects=len(cached))
                return list(cached)

        found: dict[str, Project] = {}
        # Outer roots first, so a root nested in a project found earlier is skipped
        for root in sorted(set(normalized), key=_outer_first):
            if not os.path.isdir(root):
                log.warning("scanner.root_missing", root=root)
                continue
            if _inside_project(root, found):
                log.debug("scanner.root_inside_project", root=root)
                continue
            self._scan_dir(root, 0, found, on_progress)

        projects = sorted(found.values(), key=_sort_key)
        self._cache.put(key, projects)
        log.info("scanner.scan_complete", roots=len(normalized), projects=len(projects))
        return list(projects)

    def _scan_dir(
        self,
        directory: str,
        depth: int,
        found: dict[str, Project],
        on_progress: ProgressCallback | None,
    ) -> None:
        if depth > self.scan_depth:
            return

        classification = classify_directory(directory)
        if classification.is_project:
            if directory not in found:
                found[directory] = read_project(directory, marker=classification.marker)
                log.debug(
                    "scanner.project_found",
                    path=directory,
                    marker=classification.marker.value,
                )
                if on_progress is not None:
                    on_progress(len(found))
            # Boundary: a project's subtree belongs to that project
            return

        try:
            with os.scandir(directory) as it:
                children = sorted(
                    entry.path
                    for entry in it
                    if entry.is_dir(follow_symlinks=False) and not is_ignored(entry.name)
                )
        except PermissionError:
            log.warning("scanner.permission_denied", path=directory)
            return

        for child in children:
            self._scan_dir(child, depth + 1, found, on_progress)

    # ── registered-repo mode ─────────────────────────────────────────────

    def scan_registered(
        self,
        root_dir: PathLike,
        repos: Iterable[str],
        *,
        force: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> list[Project]:
        """Read the repos a workspace config registers under *root_dir*.

        Every existing repo directory becomes a project, identified by its
        relative path, with no classification or recursion. Missing repos
        are logged and skipped. Results keep the registration order.
        *on_progress* receives the running count as each repo is read.
        """
        base = os.path.realpath(os.fspath(root_dir))
        repo_paths = tuple(repos)
        key = ("registered", base, repo_paths)

        if not force:
            cached = self._cache.get(key)
            if cached is not None:
                log.debug("scanner.cache_hit", root=base, projects=len(cached))
                return list(cached)

        projects: list[Project] = []
        seen: set[str] = set()
        for repo in repo_paths:
            directory = os.path.realpath(os.path.join(base, repo))
            if directory in seen:
                continue
            if not os.path.isdir(directory):
                log.warning("scanner.root_missing", root=directory, repo=repo)
                continue
            seen.add(directory)
            projects.append(
                read_project(
                    directory,
                    marker=ProjectMarker.REGISTERED,
                    identity=repo,
                    default_name=repo,
                )
            )
            if on_progress is not None:
                on_progress(len(projects))

        self._cache.put(key, projects)
        log.info("scanner.registered_complete", root=base, projects=len(projects))
        return list(projects)
