"""Two-tier cache store: memory in front of SQLite."""

from __future__ import annotations

import logging
from pathlib import Path

from mjmlcache.cache.disk import DiskCache
from mjmlcache.cache.memory import MemoryCache
from mjmlcache.cache.stats import CacheEntry, CacheStats

logger = logging.getLogger(__name__)


class CacheManager:
    """L1 memory, optional L2 disk. Implements ``CacheStore``.

    Disk hits are copied into memory. A disabled manager stores nothing and
    misses every lookup, which is how ``--no-cache`` is honoured.
    """

    def __init__(
        self,
        memory_max_mb: float = 100,
        disk_path: Path | None = None,
        persistent: bool = True,
        enabled: bool = True,
    ) -> None:
        self._enabled = enabled
        self._l1 = MemoryCache(max_size_mb=memory_max_mb)
        self._l2: DiskCache | None = None
        if enabled and persistent:
            self._l2 = DiskCache(db_path=disk_path)
        self._counters = CacheStats()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def get(self, key: str) -> CacheEntry | None:
        entry = self._lookup(key) if self._enabled else None
        if entry is None:
            self._counters.misses += 1
        else:
            self._counters.hits += 1
        return entry

    def _lookup(self, key: str) -> CacheEntry | None:
        entry = self._l1.get(key)
        if entry is not None or self._l2 is None:
            return entry
        entry = self._l2.get(key)
        if entry is not None:
            self._l1.set(key, entry)
        return entry

    def set(self, key: str, entry: CacheEntry, ttl: float | None = None) -> None:
        if not self._enabled:
            return
        for tier in self._tiers():
            tier.set(key, entry, ttl)
        self._counters.writes += 1

    def delete_matching(self, pattern: str) -> int:
        """Apply a glob deletion to every tier.

        The count is the larger of the per-tier counts, since L1 usually
        holds a subset of L2.
        """
        count = max((tier.delete_matching(pattern) for tier in self._tiers()), default=0)
        self._counters.invalidations += count
        if count:
            logger.debug("Invalidated %d entries matching %s", count, pattern)
        return count

    def clear(self) -> None:
        for tier in self._tiers():
            tier.clear()
        self._counters = CacheStats()

    def stats(self) -> CacheStats:
        # L2 is authoritative for size when present
        if self._l2 is not None:
            entries, size_mb = self._l2.entry_count, self._l2.size_mb
        else:
            entries, size_mb = len(self._l1), self._l1.size_mb
        return self._counters.model_copy(update={"entries": entries, "size_mb": size_mb})

    def close(self) -> None:
        if self._l2 is not None:
            self._l2.close()

    def _tiers(self) -> list[MemoryCache | DiskCache]:
        return [self._l1] if self._l2 is None else [self._l1, self._l2]
