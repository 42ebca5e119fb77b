"""Tests for cache.py -- fixed-TTL cache with an injectable clock."""

import threading

from storytel_metadata.cache import TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestGetSet:
    def test_miss_returns_none(self):
        assert TTLCache().get("missing") is None

    def test_set_then_get(self):
        cache = TTLCache()
        cache.set("key", {"matches": []})
        assert cache.get("key") == {"matches": []}

    def test_contains_and_len(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.set("b", 2)
        assert "a" in cache
        assert "c" not in cache
        assert len(cache) == 2

    def test_clear(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.clear()
        assert cache.get("a") is None
        assert len(cache) == 0


class TestExpiry:
    def test_entry_live_before_ttl(self):
        clock = FakeClock()
        cache = TTLCache(ttl=600, timer=clock)
        cache.set("key", "value")
        clock.advance(599)
        assert cache.get("key") == "value"

    def test_entry_expires_at_ttl(self):
        clock = FakeClock()
        cache = TTLCache(ttl=600, timer=clock)
        cache.set("key", "value")
        clock.advance(600)
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_reads_do_not_refresh(self):
        clock = FakeClock()
        cache = TTLCache(ttl=10, timer=clock)
        cache.set("key", "value")
        clock.advance(8)
        assert cache.get("key") == "value"
        clock.advance(8)
        assert cache.get("key") is None

    def test_per_entry_ttl(self):
        clock = FakeClock()
        cache = TTLCache(ttl=600, timer=clock)
        cache.set("short", "value", ttl=5)
        clock.advance(6)
        assert cache.get("short") is None

    def test_zero_ttl_not_stored(self):
        cache = TTLCache()
        cache.set("key", "value", ttl=0)
        assert cache.get("key") is None

    def test_rewrite_restarts_ttl(self):
        clock = FakeClock()
        cache = TTLCache(ttl=10, timer=clock)
        cache.set("key", "old")
        clock.advance(8)
        cache.set("key", "new")
        clock.advance(8)
        assert cache.get("key") == "new"


class TestThreadSafety:
    def test_concurrent_writers(self):
        cache = TTLCache()

        def _writer(prefix: str) -> None:
            for i in range(200):
                cache.set(f"{prefix}-{i}", i)

        threads = [threading.Thread(target=_writer, args=(str(n),)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 800
