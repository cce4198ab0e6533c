"""Roadmap parser: phase progress from heading or table markdown layouts."""

from __future__ import annotations

import re
from pathlib import Path

import structlog

from repograph.scanner.models import Phase, PhaseStatus, RoadmapProgress

log = structlog.get_logger("repograph.roadmap")

# ### Phase 3: Name [x]    ### Phase 3.1 Name [>]    ### Phase 4 [ ]
_HEADING_RE = re.compile(
    r"^###[ \t]+Phase[ \t]+(\d+)(?:\.\d+)?(?:[: \t]+(.*?))?[ \t]*\[([x >])\][ \t]*$",
    re.MULTILINE,
)

# | 3 | [Name](phases/03.md) | complete |
_TABLE_RE = re.compile(r"\|\s*(\d+)\s*\|\s*\[([^\]]+)\][^|]*\|\s*(\w+)\s*\|")

_HEADING_STATUS = {
    "x": PhaseStatus.DONE,
    ">": PhaseStatus.IN_PROGRESS,
    " ": PhaseStatus.PENDING,
}

_DONE_WORDS = frozenset({"complete", "done", "verified"})
_IN_PROGRESS_WORDS = frozenset({"active", "current", "in_progress", "wip"})


def _table_status(word: str) -> PhaseStatus:
    word = word.lower()
    if word in _DONE_WORDS:
        return PhaseStatus.DONE
    if word in _IN_PROGRESS_WORDS:
        return PhaseStatus.IN_PROGRESS
    return PhaseStatus.PENDING


def _heading_phases(content: str) -> list[Phase]:
    phases = []
    for m in _HEADING_RE.finditer(content):
        number = int(m.group(1))
        name = (m.group(2) or "").strip() or f"Phase {number}"
        phases.append(Phase(number, name, _HEADING_STATUS[m.group(3)]))
    return phases


def _table_phases(content: str) -> list[Phase]:
    return [
        Phase(int(m.group(1)), m.group(2).strip(), _table_status(m.group(3)))
        for m in _TABLE_RE.finditer(content)
    ]


def parse_roadmap(content: str) -> RoadmapProgress:
    """Summarize phase progress. Headings take precedence over tables.

    Text in neither layout yields zero phases.
    """
    phases = _heading_phases(content) or _table_phases(content)
    progress = RoadmapProgress(total_phases=len(phases), phases=phases)
    for phase in phases:
        if phase.status is PhaseStatus.DONE:
            progress.completed_phases += 1
        elif progress.current_phase is None:
            progress.current_phase = phase.number
            progress.current_phase_name = phase.name
    return progress


def read_roadmap(path: Path) -> RoadmapProgress:
    """Parse the roadmap at *path*; absent, undecodable or unreadable means zero phases."""
    if not path.is_file():
        return RoadmapProgress()
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        log.warning("roadmap.permission_denied", path=str(path))
        return RoadmapProgress()
    except UnicodeDecodeError:
        log.warning("roadmap.malformed", path=str(path))
        return RoadmapProgress()
    return parse_roadmap(content)
