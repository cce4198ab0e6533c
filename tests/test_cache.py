"""Tests for ScanCache: controlled clock, no sleeping."""

from __future__ import annotations

from repograph.scanner.cache import ScanCache


class TestScanCache:
    def test_empty(self, clock):
        cache: ScanCache[list[str]] = ScanCache(ttl=60, clock=clock)
        assert cache.get("k") is None
        assert cache.age is None

    def test_hit_within_ttl(self, clock):
        cache: ScanCache[list[str]] = ScanCache(ttl=60, clock=clock)
        cache.put("k", ["a"])
        clock.advance(59.9)
        assert cache.get("k") == ["a"]
        assert abs(cache.age - 59.9) < 1e-9

    def test_expires_at_ttl(self, clock):
        cache: ScanCache[list[str]] = ScanCache(ttl=60, clock=clock)
        cache.put("k", ["a"])
        clock.advance(60)
        assert cache.get("k") is None

    def test_different_key_misses(self, clock):
        cache: ScanCache[list[str]] = ScanCache(ttl=60, clock=clock)
        cache.put("k", ["a"])
        assert cache.get("other") is None

    def test_single_slot_replaced_wholesale(self, clock):
        cache: ScanCache[list[str]] = ScanCache(ttl=60, clock=clock)
        cache.put("first", ["a"])
        cache.put("second", ["b"])
        assert cache.get("first") is None
        assert cache.get("second") == ["b"]

    def test_put_restarts_ttl(self, clock):
        cache: ScanCache[list[str]] = ScanCache(ttl=60, clock=clock)
        cache.put("k", ["a"])
        clock.advance(50)
        cache.put("k", ["b"])
        clock.advance(50)
        assert cache.get("k") == ["b"]

    def test_invalidate(self, clock):
        cache: ScanCache[list[str]] = ScanCache(ttl=60, clock=clock)
        cache.put("k", ["a"])
        cache.invalidate()
        assert cache.get("k") is None

    def test_zero_ttl_never_hits(self, clock):
        cache: ScanCache[list[str]] = ScanCache(ttl=0, clock=clock)
        cache.put("k", ["a"])
        assert cache.get("k") is None
