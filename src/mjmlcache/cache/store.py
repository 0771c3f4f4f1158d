"""The key/value interface the render pipeline consumes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from mjmlcache.cache.stats import CacheEntry


@runtime_checkable
class CacheStore(Protocol):
    """Key/value store with glob-pattern deletion.

    ``ttl`` of ``None`` means the entry never expires.
    """

    def get(self, key: str) -> CacheEntry | None: ...

    def set(self, key: str, entry: CacheEntry, ttl: float | None = None) -> None: ...

    def delete_matching(self, pattern: str) -> int: ...
