"""L2 persistent cache in a single SQLite file."""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from mjmlcache.cache.stats import CacheEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS rendered (
    key TEXT PRIMARY KEY,
    markup TEXT NOT NULL DEFAULT '',
    timestamp INTEGER NOT NULL,
    expires_at REAL,
    size_bytes INTEGER NOT NULL DEFAULT 0
)
"""


def default_db_path() -> Path:
    return Path.home() / ".mjmlcache" / "cache.db"


class DiskCache:
    """Rendered markup keyed by cache key; deletion uses SQLite GLOB."""

    def __init__(self, db_path: Path | None = None) -> None:
        self._path = Path(db_path) if db_path else default_db_path()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        with self._write() as conn:
            conn.execute(_SCHEMA)

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def _write(self) -> Iterator[sqlite3.Connection]:
        # sqlite3's connection context manager commits, or rolls back on error
        with self._conn:
            yield self._conn

    def get(self, key: str) -> CacheEntry | None:
        row = self._conn.execute(
            "SELECT markup, timestamp, expires_at FROM rendered WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        markup, timestamp, expires_at = row
        if expires_at is not None and time.time() > expires_at:
            with self._write() as conn:
                conn.execute("DELETE FROM rendered WHERE key = ?", (key,))
            return None
        return CacheEntry(markup=markup, timestamp=timestamp)

    def set(self, key: str, entry: CacheEntry, ttl: float | None = None) -> None:
        expires_at = None if ttl is None else time.time() + ttl
        with self._write() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO rendered VALUES (?, ?, ?, ?, ?)",
                (key, entry.markup, entry.timestamp, expires_at, entry.size_bytes),
            )

    def delete_matching(self, pattern: str) -> int:
        """Delete keys matching a glob pattern; returns the number removed."""
        with self._write() as conn:
            removed = conn.execute(
                "DELETE FROM rendered WHERE key GLOB ?", (pattern,)
            ).rowcount
        if removed:
            logger.debug("Deleted %d disk entries matching %s", removed, pattern)
        return removed

    def clear(self) -> None:
        with self._write() as conn:
            conn.execute("DELETE FROM rendered")

    @property
    def entry_count(self) -> int:
        (count,) = self._conn.execute("SELECT COUNT(*) FROM rendered").fetchone()
        return count

    @property
    def size_mb(self) -> float:
        (total,) = self._conn.execute(
            "SELECT COALESCE(SUM(size_bytes), 0) FROM rendered"
        ).fetchone()
        return total / (1024 * 1024)

    def close(self) -> None:
        self._conn.close()
