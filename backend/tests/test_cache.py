"""Tests for the interpreted-query cache."""

from propsearch.ai.cache import InterpretCache, normalize_query
from propsearch.ai.filters import Filters, PropertyType


class TestNormalizeQuery:
    def test_trims_and_lowercases(self):
        assert normalize_query("  Apartamento Cerca Del Metro  ") == "apartamento cerca del metro"

    def test_inner_whitespace_is_kept(self):
        assert normalize_query("Casa  Grande") == "casa  grande"


class TestInterpretCache:
    """Tests for InterpretCache."""

    def test_store_and_retrieve(self, cache):
        filters = Filters(bedrooms=2)
        cache.set("casa", filters)

        assert cache.get("casa") is filters

    def test_miss_returns_none(self, cache):
        assert cache.get("nada") is None

    def test_entry_served_until_ttl(self, cache, clock):
        cache.set("casa", Filters(bedrooms=3))

        clock.advance(299.9)
        assert cache.get("casa") == Filters(bedrooms=3)

    def test_entry_expires_at_ttl(self, cache, clock):
        cache.set("casa", Filters(bedrooms=3))

        clock.advance(300)

        assert cache.get("casa") is None
        assert "casa" not in cache

    def test_set_refreshes_timestamp(self, cache, clock):
        cache.set("casa", Filters(bedrooms=1))
        clock.advance(200)
        cache.set("casa", Filters(bedrooms=2))

        assert cache.entry("casa").timestamp == clock.now
        clock.advance(200)
        assert cache.get("casa") == Filters(bedrooms=2)

    def test_evicts_least_recently_used(self, clock):
        cache = InterpretCache(ttl_seconds=300, max_entries=2, clock=clock)
        cache.set("a", Filters(bedrooms=1))
        cache.set("b", Filters(bedrooms=2))
        cache.get("a")
        cache.set("c", Filters(bedrooms=3))

        assert "a" in cache
        assert "b" not in cache
        assert len(cache) == 2

    def test_unbounded(self, clock):
        cache = InterpretCache(max_entries=None, clock=clock)
        for i in range(50):
            cache.set(str(i), Filters(property_type=PropertyType.HOUSE))

        assert len(cache) == 50

    def test_stats(self, cache):
        cache.get("casa")
        cache.set("casa", Filters())
        cache.get("casa")
        cache.get("casa")

        stats = cache.get_stats()

        assert stats["hits"] == 2
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 2 / 3

    def test_clear(self, cache):
        cache.set("casa", Filters())
        cache.clear()

        assert len(cache) == 0
        assert cache.get_stats()["hits"] == 0
