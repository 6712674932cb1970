"""Tests for the TTL cache."""

from healthos_nutrition.services.cache import InMemoryCache


def test_cache_entry_expires_after_ttl(clock) -> None:
    cache = InMemoryCache(ttl_seconds=300, clock=clock)
    cache.set(("rice", 5), ["hit"])

    clock.advance(299.999)
    assert cache.get(("rice", 5)) == ["hit"]

    clock.advance(0.002)
    assert cache.get(("rice", 5)) is None


def test_cache_set_refreshes_timestamp(clock) -> None:
    cache = InMemoryCache(ttl_seconds=300, clock=clock)
    cache.set("key", 1)
    clock.advance(301)
    cache.set("key", 2)

    assert cache.get("key") == 2
    assert cache.get("missing") is None
