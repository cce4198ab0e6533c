"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_SCAN_DEPTH = 5
DEFAULT_CACHE_TTL = 60.0

_TRUTHY = {"1", "true", "yes", "on"}


def _env_int(key: str, default: int) -> int:
    return int(os.environ.get(key, default))


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


def _env_bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    """Scanner and graph builder knobs.

    Environment variables:
        REPOGRAPH_SCAN_DEPTH   — max directory depth below each root (default: 5)
        REPOGRAPH_CACHE_TTL    — scan cache lifetime in seconds (default: 60)
        REPOGRAPH_SCAN_IMPORTS — also scan source files for imports (default: false)
    """

    scan_depth: int = DEFAULT_SCAN_DEPTH
    cache_ttl: float = DEFAULT_CACHE_TTL
    scan_imports: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            scan_depth=_env_int("REPOGRAPH_SCAN_DEPTH", DEFAULT_SCAN_DEPTH),
            cache_ttl=_env_float("REPOGRAPH_CACHE_TTL", DEFAULT_CACHE_TTL),
            scan_imports=_env_bool("REPOGRAPH_SCAN_IMPORTS", False),
        )
