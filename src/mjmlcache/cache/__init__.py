"""Cache subsystem — identity-scoped keys over a two-tier (memory + disk) store."""

from mjmlcache.cache.keys import build_cache_key, derive_query_variant, invalidation_patterns
from mjmlcache.cache.manager import CacheManager
from mjmlcache.cache.stats import CacheEntry, CacheStats
from mjmlcache.cache.store import CacheStore

__all__ = [
    "CacheManager",
    "CacheEntry",
    "CacheStats",
    "CacheStore",
    "build_cache_key",
    "derive_query_variant",
    "invalidation_patterns",
]
