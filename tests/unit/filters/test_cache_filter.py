"""Tests for the in-memory cache backend and the Cache filter."""
from __future__ import annotations

from typing import List

from mason.core.filters.base import compose
from mason.core.filters.cache import MemoryCache, cache_filter


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestMemoryCache:
    def test_get_missing_returns_none(self) -> None:
        assert MemoryCache().get("nope") is None

    def test_set_and_get(self) -> None:
        backend = MemoryCache()
        backend.set("k", "v")
        assert backend.get("k") == "v"
        assert len(backend) == 1

    def test_expires_in_option(self) -> None:
        clock = FakeClock()
        backend = MemoryCache(clock=clock)
        backend.set("k", "v", {"expires_in": 10})
        clock.now += 9
        assert backend.get("k") == "v"
        clock.now += 1
        assert backend.get("k") is None
        assert len(backend) == 0

    def test_default_expiry(self) -> None:
        clock = FakeClock()
        backend = MemoryCache(default_expires_in=5, clock=clock)
        backend.set("k", "v")
        clock.now += 5
        assert backend.get("k") is None

    def test_unread_expired_entries_stay_until_purged(self) -> None:
        clock = FakeClock()
        backend = MemoryCache(clock=clock)
        backend.set("short", "1", {"expires_in": 1})
        backend.set("long", "2", {"expires_in": 100})
        backend.set("forever", "3")
        clock.now += 5
        assert len(backend) == 3
        assert backend.purge_expired() == 1
        assert len(backend) == 2
        assert backend.get("long") == "2"
        assert backend.get("forever") == "3"

    def test_remove_and_clear(self) -> None:
        backend = MemoryCache()
        backend.set("a", "1")
        backend.set("b", "2")
        backend.remove("a")
        assert backend.get("a") is None
        backend.clear()
        assert len(backend) == 0


class TestCacheFilter:
    def test_miss_renders_and_stores(self) -> None:
        backend = MemoryCache()
        assert compose([cache_filter("k", cache=backend)], "fresh")() == "fresh"
        assert backend.get("k") == "fresh"

    def test_hit_skips_yield_block(self) -> None:
        backend = MemoryCache()
        backend.set("k", "cached")
        calls: List[int] = []

        def produce() -> str:
            calls.append(1)
            return "fresh"

        assert compose([cache_filter("k", cache=backend)], produce)() == "cached"
        assert calls == []

    def test_expires_in_is_passed_to_backend(self) -> None:
        received = []

        class RecordingCache:
            def get(self, key):
                return None

            def set(self, key, value, options=None):
                received.append((key, value, options))

        compose([cache_filter("k", 30, cache=RecordingCache())], "v")()
        assert received == [("k", "v", {"expires_in": 30})]
