"""TTL 캐시 테스트"""

import pytest

from crypto_weather.cache import DEFAULT_TTL_SECONDS, TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class TestTTLCache:
    """TTLCache 테스트"""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cache(self, clock):
        return TTLCache(default_ttl=60, clock=clock)

    def test_default_ttl(self):
        assert TTLCache().default_ttl == DEFAULT_TTL_SECONDS == 900

    def test_miss(self, cache):
        assert cache.get("quote:bitcoin") is None

    def test_put_and_get(self, cache):
        cache.put("quote:bitcoin", {"price": 45000})
        assert cache.get("quote:bitcoin") == {"price": 45000}
        assert len(cache) == 1

    def test_expiry(self, cache, clock):
        cache.put("quote:bitcoin", 1)

        clock.advance(59)
        assert cache.get("quote:bitcoin") == 1

        clock.advance(1)
        assert cache.get("quote:bitcoin") is None
        assert len(cache) == 0

    def test_per_key_ttl(self, cache, clock):
        cache.put("short", "a", ttl=5)
        cache.put("long", "b")

        clock.advance(10)
        assert cache.get("short") is None
        assert cache.get("long") == "b"

    def test_overwrite_resets_ttl(self, cache, clock):
        cache.put("k", 1)
        clock.advance(50)
        cache.put("k", 2)
        clock.advance(50)
        assert cache.get("k") == 2

    def test_invalidate_and_clear(self, cache):
        cache.put("a", 1)
        cache.put("b", 2)

        cache.invalidate("a")
        cache.invalidate("missing")
        assert cache.get("a") is None
        assert cache.get("b") == 2

        cache.clear()
        assert len(cache) == 0
