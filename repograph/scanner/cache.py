"""Single-slot TTL cache for scan results."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class _Entry(Generic[T]):
    key: Hashable
    value: T
    stored_at: float


class ScanCache(Generic[T]):
    """Holds the last result only. A put replaces the slot wholesale.

    *clock* returns seconds; tests pass a fake clock to control expiry.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entry: _Entry[T] | None = None
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> T | None:
        """Cached value for *key*, or None when empty, expired or keyed differently."""
        with self._lock:
            entry = self._entry
            if entry is None or entry.key != key:
                return None
            if self._clock() - entry.stored_at >= self.ttl:
                return None
            return entry.value

    def put(self, key: Hashable, value: T) -> None:
        with self._lock:
            self._entry = _Entry(key=key, value=value, stored_at=self._clock())

    def invalidate(self) -> None:
        with self._lock:
            self._entry = None

    @property
    def age(self) -> float | None:
        """Seconds since the slot was filled, None when empty."""
        with self._lock:
            if self._entry is None:
                return None
            return self._clock() - self._entry.stored_at
