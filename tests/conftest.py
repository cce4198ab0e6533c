"""Shared pytest fixtures for repograph tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_project(tmp_path: Path):
    """Create a project directory below ``tmp_path``.

    ``package`` is written as package.json; ``tlc``/``planning``/``git``
    create the respective markers; ``roadmap`` is written to
    ``.planning/ROADMAP.md`` (implies ``planning``).
    """

    def _make(
        rel: str,
        package: dict | None = None,
        *,
        tlc: bool = False,
        planning: bool = False,
        git: bool = False,
        roadmap: str | None = None,
        base: Path | None = None,
    ) -> Path:
        directory = (base or tmp_path) / rel
        directory.mkdir(parents=True, exist_ok=True)
        if package is not None:
            (directory / "package.json").write_text(json.dumps(package, indent=2))
        if tlc:
            (directory / ".tlc.json").write_text("{}")
        if planning or roadmap is not None:
            (directory / ".planning").mkdir(exist_ok=True)
        if roadmap is not None:
            (directory / ".planning" / "ROADMAP.md").write_text(roadmap)
        if git:
            (directory / ".git").mkdir(exist_ok=True)
        return directory

    return _make
