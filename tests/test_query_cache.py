# =============================================================================
# tests/test_query_cache.py - Query Cache Tests
# =============================================================================

import pytest

from lib.query_cache import QueryCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestQueryCache:
    """Tests for QueryCache."""

    def test_fetcher_runs_once_until_invalidated(self):
        cache = QueryCache()
        calls = []

        def fetch():
            calls.append(1)
            return [{"name": "Oils"}]

        assert cache.get_or_fetch("categories", fetch) == [{"name": "Oils"}]
        assert cache.get_or_fetch("categories", fetch) == [{"name": "Oils"}]
        assert len(calls) == 1
        assert cache.hits == 1 and cache.misses == 1

        cache.invalidate(["categories"])
        cache.get_or_fetch("categories", fetch)
        assert len(calls) == 2

    def test_invalidate_reports_dropped_keys(self):
        cache = QueryCache()
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.invalidate(["a", "missing"]) == ["a"]
        assert cache.keys() == ["b"]

    def test_returned_values_are_copies(self):
        cache = QueryCache()
        value = cache.get_or_fetch("footer-content", lambda: {"links": ["/about"]})
        value["links"].append("/hacked")

        assert cache.get("footer-content") == {"links": ["/about"]}

    def test_failed_fetch_is_not_cached(self):
        cache = QueryCache()

        def boom():
            raise RuntimeError("store down")

        with pytest.raises(RuntimeError):
            cache.get_or_fetch("products", boom)
        assert "products" not in cache
        assert cache.get_or_fetch("products", lambda: []) == []

    def test_ttl_expiry(self):
        clock = FakeClock()
        cache = QueryCache(ttl_seconds=10, clock=clock)
        cache.set("k", "v")

        clock.now = 9
        assert cache.get("k") == "v"
        clock.now = 10
        assert cache.get("k") is None

    def test_clear(self):
        cache = QueryCache()
        cache.set("a", 1)
        cache.clear()
        assert cache.keys() == []
