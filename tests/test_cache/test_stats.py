"""Tests for cache entry and stats models."""

from mjmlcache.cache.stats import CacheEntry, CacheStats


class TestCacheEntry:
    def test_fresh_when_newer_than_source(self):
        assert CacheEntry(markup="x", timestamp=200).is_fresh(100)

    def test_stale_when_equal_or_older(self):
        assert not CacheEntry(markup="x", timestamp=100).is_fresh(100)
        assert not CacheEntry(markup="x", timestamp=50).is_fresh(100)

    def test_empty_markup_never_fresh(self):
        assert not CacheEntry(markup="", timestamp=200).is_fresh(100)

    def test_default_timestamp_is_now(self):
        assert CacheEntry(markup="x").timestamp > 1_600_000_000

    def test_size_bytes_utf8(self):
        assert CacheEntry(markup="é").size_bytes == 2


class TestCacheStats:
    def test_hit_rate(self):
        assert CacheStats(hits=3, misses=1).hit_rate == 0.75

    def test_hit_rate_empty(self):
        assert CacheStats().hit_rate == 0.0
