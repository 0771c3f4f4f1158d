"""L1 in-process cache: least recently used entries go first."""

from __future__ import annotations

import time
from collections import OrderedDict
from fnmatch import fnmatchcase
from typing import NamedTuple

from mjmlcache.cache.stats import CacheEntry

_MB = 1024 * 1024


class _Slot(NamedTuple):
    entry: CacheEntry
    expires_at: float | None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


class MemoryCache:
    """Bounded by total markup size; keys match globs like the disk tier."""

    def __init__(self, max_size_mb: float = 100) -> None:
        self._slots: OrderedDict[str, _Slot] = OrderedDict()
        self._budget = int(max_size_mb * _MB)
        self._used = 0

    def get(self, key: str) -> CacheEntry | None:
        slot = self._slots.get(key)
        if slot is None:
            return None
        if slot.expired(time.time()):
            self._drop(key)
            return None
        self._slots.move_to_end(key)
        return slot.entry

    def set(self, key: str, entry: CacheEntry, ttl: float | None = None) -> None:
        self._drop(key)
        needed = entry.size_bytes
        while self._slots and self._used + needed > self._budget:
            oldest = next(iter(self._slots))
            self._drop(oldest)
        expires_at = None if ttl is None else time.time() + ttl
        self._slots[key] = _Slot(entry, expires_at)
        self._used += needed

    def delete_matching(self, pattern: str) -> int:
        """Drop every key matching ``pattern`` (``*``, ``?``, ``[...]``)."""
        doomed = [key for key in self._slots if fnmatchcase(key, pattern)]
        for key in doomed:
            self._drop(key)
        return len(doomed)

    def clear(self) -> None:
        self._slots.clear()
        self._used = 0

    @property
    def size_mb(self) -> float:
        return self._used / _MB

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, key: object) -> bool:
        return key in self._slots

    def _drop(self, key: str) -> None:
        slot = self._slots.pop(key, None)
        if slot is not None:
            self._used -= slot.entry.size_bytes
