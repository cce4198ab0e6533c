"""Project classification and the directory ignore set."""

from __future__ import annotations

import os

from repograph.scanner.models import NOT_PROJECT, Classification, ProjectMarker

TLC_CONFIG_FILE = ".tlc.json"
PLANNING_DIR = ".planning"
MANIFEST_FILE = "package.json"
VCS_DIR = ".git"
ROADMAP_FILE = "ROADMAP.md"

# Never recursed into: dependency caches, VCS internals, build output, framework caches
IGNORED_DIRS = frozenset(
    {
        "node_modules",
        "bower_components",
        ".git",
        ".hg",
        ".svn",
        "dist",
        "build",
        "out",
        "coverage",
        ".nyc_output",
        "vendor",
        ".next",
        ".nuxt",
        ".svelte-kit",
        ".turbo",
        ".cache",
        "__pycache__",
        ".venv",
    }
)


def is_ignored(name: str) -> bool:
    return name in IGNORED_DIRS


def classify_directory(directory: str) -> Classification:
    """Decide whether *directory* is a project root.

    Rules, first match wins:
        .tlc.json present           -> TLC_CONFIG
        .planning/ present          -> PLANNING
        package.json and .git both  -> MANIFEST_AND_VCS
    """
    if os.path.isfile(os.path.join(directory, TLC_CONFIG_FILE)):
        return Classification(ProjectMarker.TLC_CONFIG)
    if os.path.isdir(os.path.join(directory, PLANNING_DIR)):
        return Classification(ProjectMarker.PLANNING)
    if os.path.isfile(os.path.join(directory, MANIFEST_FILE)) and os.path.exists(
        os.path.join(directory, VCS_DIR)
    ):
        return Classification(ProjectMarker.MANIFEST_AND_VCS)
    return NOT_PROJECT
