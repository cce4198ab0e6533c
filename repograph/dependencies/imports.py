"""Static import scanning for JavaScript/TypeScript source trees.

Lexical only: no parsing and no path-alias (tsconfig ``paths``) resolution.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path

import structlog

from repograph.scanner.classify import is_ignored

log = structlog.get_logger("repograph.imports")

SOURCE_EXTENSIONS: tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")

# import x from 'y' / import { x } from 'y' / import 'y'
_ES_IMPORT_RE = re.compile(r"""import\s+(?:[\w*{}\s,]+\s+from\s+)?['"]([^'"]+)['"]""")
# require('y')
_REQUIRE_RE = re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")
# import('y')
_DYNAMIC_IMPORT_RE = re.compile(r"""import\s*\(\s*['"]([^'"]+)['"]\s*\)""")

_PATTERNS = (_ES_IMPORT_RE, _REQUIRE_RE, _DYNAMIC_IMPORT_RE)


def package_name(specifier: str) -> str:
    """Normalize an import specifier to the package it names.

    ``./x`` and ``/x`` pass through unchanged; ``@scope/name/sub`` becomes
    ``@scope/name``; ``name/sub`` becomes ``name``.
    """
    if specifier.startswith((".", "/")):
        return specifier
    parts = specifier.split("/")
    if specifier.startswith("@"):
        return "/".join(parts[:2]) if len(parts) >= 2 else specifier
    return parts[0]


def is_relative(specifier: str) -> bool:
    return specifier.startswith((".", "/"))


def extract_imports(content: str) -> list[str]:
    """All import specifiers in *content*, in pattern order, duplicates kept."""
    return [m.group(1) for pattern in _PATTERNS for m in pattern.finditer(content)]


def extract_packages(content: str) -> set[str]:
    """Package names imported by *content*; relative and absolute paths excluded."""
    return {
        package_name(spec) for spec in extract_imports(content) if not is_relative(spec)
    }


def _walk_error(err: OSError) -> None:
    if isinstance(err, PermissionError):
        log.warning("imports.permission_denied", path=err.filename)
        return
    raise err


def iter_source_files(
    directory: Path, extensions: Iterable[str] = SOURCE_EXTENSIONS
) -> list[Path]:
    """Source files below *directory*, skipping dependency, build and VCS dirs."""
    suffixes = tuple(extensions)
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(directory, onerror=_walk_error):
        dirnames[:] = sorted(d for d in dirnames if not is_ignored(d))
        for name in sorted(filenames):
            if name.endswith(suffixes):
                files.append(Path(dirpath) / name)
    return files


def scan_imported_packages(
    directory: Path, extensions: Iterable[str] = SOURCE_EXTENSIONS
) -> set[str]:
    """Every package name imported anywhere in the source tree at *directory*."""
    packages: set[str] = set()
    for file_path in iter_source_files(directory, extensions):
        try:
            content = file_path.read_text(encoding="utf-8", errors="replace")
        except PermissionError:
            log.warning("imports.permission_denied", path=str(file_path))
            continue
        packages |= extract_packages(content)
    return packages
