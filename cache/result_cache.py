"""
In-process, time-bounded cache of analysis results.

- `get` serves an entry only inside the freshness window; stale entries are
  misses but stay in place until evicted.
- `put` evicts the oldest entries (insertion order) once the ceiling is passed.
- `CacheSweeper` periodically drops entries older than the maximum age.
Values are deep-copied on the way in and out so callers never share state.
"""
from __future__ import annotations

import copy
import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional

from config import (
    CACHE_EVICT_COUNT,
    CACHE_FRESHNESS_SECONDS,
    CACHE_MAX_AGE_SECONDS,
    CACHE_MAX_ENTRIES,
    CACHE_SWEEP_INTERVAL_SECONDS,
)
from models import AnalysisOptions, AnalysisResult, CacheEntry

logger = logging.getLogger(__name__)


class ResultCache:
    """Thread-safe map of cache key → timestamped AnalysisResult."""

    def __init__(
        self,
        freshness_seconds: float = CACHE_FRESHNESS_SECONDS,
        max_age_seconds: float = CACHE_MAX_AGE_SECONDS,
        max_entries: int = CACHE_MAX_ENTRIES,
        evict_count: int = CACHE_EVICT_COUNT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.freshness_seconds = freshness_seconds
        self.max_age_seconds = max_age_seconds
        self.max_entries = max_entries
        self.evict_count = evict_count
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def make_key(url: str, options: AnalysisOptions) -> str:
        return f"{url}-{options.cache_fragment()}"

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.created_at >= self.freshness_seconds:
                return None
            return copy.deepcopy(entry)

    def put(self, key: str, data: AnalysisResult) -> None:
        entry = CacheEntry(key=key, data=copy.deepcopy(data), created_at=self._clock())
        with self._lock:
            # Re-inserting moves the key to the newest position
            self._entries.pop(key, None)
            self._entries[key] = entry
            if len(self._entries) > self.max_entries:
                for _ in range(min(self.evict_count, len(self._entries))):
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug("Evicted cache entry %s", evicted)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def sweep(self) -> int:
        """Remove entries older than the maximum age. Returns how many went."""
        now = self._clock()
        with self._lock:
            stale = [k for k, e in self._entries.items() if now - e.created_at > self.max_age_seconds]

        removed = 0
        for key in stale:
            # Short critical section per key; the entry may have been refreshed meanwhile
            with self._lock:
                entry = self._entries.get(key)
                if entry is not None and now - entry.created_at > self.max_age_seconds:
                    del self._entries[key]
                    removed += 1
        return removed


class CacheSweeper:
    """Background thread running `ResultCache.sweep` on a fixed interval."""

    def __init__(self, cache: ResultCache, interval_seconds: float = CACHE_SWEEP_INTERVAL_SECONDS) -> None:
        self.cache = cache
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="cache-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def run_once(self) -> int:
        try:
            removed = self.cache.sweep()
        except Exception:
            logger.exception("Cache sweep failed")
            return 0
        logger.info("Cache swept - %d removed, current size: %d", removed, self.cache.size())
        return removed

    def _run(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            self.run_once()
