"""Sliding-window request throttle.

Each client may make at most `limit` requests per `window_seconds`. State is
per process and in memory; a limit of 0 disables throttling. Clients idle for
a full window are dropped at most once per window.
"""

import logging
import threading
import time
from collections import deque

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, limit: int, window_seconds: float = 60.0, clock=time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def _sweep(self, now: float) -> None:
        idle = [c for c, hits in self._hits.items() if not hits or now - hits[-1] >= self.window_seconds]
        for c in idle:
            del self._hits[c]
        self._last_sweep = now

    def check(self, client: str) -> float | None:
        """Record a request. Returns None if allowed, else seconds until a slot frees up."""
        if self.limit <= 0:
            return None

        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)

            hits = self._hits.setdefault(client, deque())
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()

            if len(hits) >= self.limit:
                retry_after = self.window_seconds - (now - hits[0])
                logger.warning("Rate limit hit for %s (%d/%ds)", client, self.limit, self.window_seconds)
                return max(retry_after, 0.0)

            hits.append(now)
            return None

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
