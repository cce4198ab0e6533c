"""Reader for package.json manifests, including monorepo workspaces."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from repograph.scanner.classify import MANIFEST_FILE
from repograph.scanner.models import WorkspacePackage

log = structlog.get_logger("repograph.manifest")

WORKSPACE_PROTOCOL = "workspace:"
FILE_PROTOCOL = "file:"


@dataclass
class Manifest:
    """The parts of a package.json this library consumes."""

    name: str | None = None
    version: str | None = None
    description: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    peer_dependencies: dict[str, str] = field(default_factory=dict)
    workspace_globs: list[str] | None = None
    # False when the file exists but could not be read or parsed
    parsed: bool = True

    @property
    def is_monorepo(self) -> bool:
        return self.workspace_globs is not None


def is_local_spec(spec: str) -> bool:
    """True for version specs pointing inside the workspace (``workspace:``/``file:``)."""
    return spec.startswith(WORKSPACE_PROTOCOL) or spec.startswith(FILE_PROTOCOL)


def _str_or_none(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _dep_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {name: spec for name, spec in value.items() if isinstance(spec, str)}


def _workspace_globs(value: object) -> list[str] | None:
    # npm: ["packages/*"]   yarn: {"packages": ["packages/*"], "nohoist": [...]}
    if isinstance(value, dict):
        value = value.get("packages")
    if not isinstance(value, list):
        return None
    return [g for g in value if isinstance(g, str) and g]


def parse_manifest(content: str) -> Manifest | None:
    """Parse manifest text. Returns None when it is not a JSON object."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    return Manifest(
        name=_str_or_none(data.get("name")),
        version=_str_or_none(data.get("version")),
        description=_str_or_none(data.get("description")),
        dependencies=_dep_map(data.get("dependencies")),
        dev_dependencies=_dep_map(data.get("devDependencies")),
        peer_dependencies=_dep_map(data.get("peerDependencies")),
        workspace_globs=_workspace_globs(data.get("workspaces")),
    )


def read_manifest(directory: Path) -> Manifest | None:
    """Read ``<directory>/package.json``.

    Returns None when the file is absent. A malformed or unreadable-for-
    permission manifest is logged and returned as an empty ``Manifest`` with
    ``parsed=False`` so the project keeps default metadata. Other I/O
    errors propagate.
    """
    manifest_path = directory / MANIFEST_FILE
    if not manifest_path.is_file():
        return None

    try:
        content = manifest_path.read_text(encoding="utf-8")
    except PermissionError:
        log.warning("manifest.permission_denied", path=str(manifest_path))
        return Manifest(parsed=False)
    except UnicodeDecodeError:
        log.warning("manifest.malformed", path=str(manifest_path), reason="not utf-8")
        return Manifest(parsed=False)

    manifest = parse_manifest(content)
    if manifest is None:
        log.warning("manifest.malformed", path=str(manifest_path), reason="invalid json")
        return Manifest(parsed=False)
    return manifest


def resolve_workspaces(directory: Path, globs: list[str]) -> list[WorkspacePackage]:
    """Expand workspace globs and keep the matches that hold a manifest.

    Negated globs (``!pattern``) are ignored. No match is an empty list,
    not an error.
    """
    packages: dict[str, WorkspacePackage] = {}
    for pattern in globs:
        if pattern.startswith("!"):
            continue
        pattern = pattern.rstrip("/")
        if not pattern or Path(pattern).is_absolute():
            continue
        for hit in sorted(directory.glob(pattern)):
            if not hit.is_dir() or not (hit / MANIFEST_FILE).is_file():
                continue
            key = str(hit.resolve())
            if key in packages:
                continue
            sub = read_manifest(hit) or Manifest()
            packages[key] = WorkspacePackage(
                path=key,
                name=sub.name or hit.name,
                version=sub.version,
            )
    return list(packages.values())
