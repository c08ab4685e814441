"""Pluggable caches for raw series text, keyed by variable/point/period with a TTL."""
import logging
import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

import duckdb

logger = logging.getLogger(__name__)


def cache_key(variable: str, lat: float, lon: float, start_year: int, end_year: int) -> str:
    return f"series:{variable}:{lat:.4f}:{lon:.4f}:{start_year}:{end_year}"


class SeriesCache(ABC):
    @abstractmethod
    def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...


class NullCache(SeriesCache):
    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        pass


class MemoryCache(SeriesCache):
    """Expired entries are swept on every write; beyond max_entries the oldest go first."""

    def __init__(self, ttl_seconds: float, max_entries: int = 256, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str) -> None:
        with self._lock:
            now = self._clock()
            expired = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl_seconds]
            for k in expired:
                del self._entries[k]

            self._entries.pop(key, None)
            # Dicts keep insertion order, so the first keys are the oldest writes
            while self._entries and len(self._entries) >= self.max_entries:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = (now, value)

    def size(self) -> int:
        with self._lock:
            return len(self._entries)


def _utcnow() -> datetime:
    """Current UTC time as a naive datetime (for DuckDB TIMESTAMP columns)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DuckDBCache(SeriesCache):
    """Cache rows survive restarts; expired rows are ignored and replaced on write."""

    def __init__(self, db: duckdb.DuckDBPyConnection, ttl_seconds: float, clock=_utcnow):
        self.db = db
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def get(self, key: str) -> str | None:
        cutoff = self._clock() - timedelta(seconds=self.ttl_seconds)
        row = self.db.cursor().execute(
            "SELECT body FROM series_cache WHERE key = ? AND stored_at > ?",
            [key, cutoff],
        ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self.purge_expired()
        self.db.cursor().execute(
            "INSERT OR REPLACE INTO series_cache (key, body, stored_at) VALUES (?, ?, ?)",
            [key, value, self._clock()],
        )

    def purge_expired(self) -> int:
        cutoff = self._clock() - timedelta(seconds=self.ttl_seconds)
        cur = self.db.cursor()
        n = cur.execute("SELECT COUNT(*) FROM series_cache WHERE stored_at <= ?", [cutoff]).fetchone()[0]
        cur.execute("DELETE FROM series_cache WHERE stored_at <= ?", [cutoff])
        if n:
            logger.info("Purged %d expired series", n)
        return n
