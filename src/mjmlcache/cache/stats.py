"""Cache entry and statistics models."""

from __future__ import annotations

import time

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """Minified HTML for one content identity.

    There is no TTL: the entry is fresh as long as ``timestamp`` is newer
    than the source's last modification.
    """

    markup: str
    timestamp: int = Field(default_factory=lambda: int(time.time()))

    def is_fresh(self, last_modified: int) -> bool:
        return bool(self.markup) and self.timestamp > last_modified

    @property
    def size_bytes(self) -> int:
        return len(self.markup.encode("utf-8"))


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    entries: int = 0
    size_mb: float = 0.0
    hits: int = 0
    misses: int = 0
    writes: int = 0
    invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
