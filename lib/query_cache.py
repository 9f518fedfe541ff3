# =============================================================================
# lib/query_cache.py - Keyed Query Cache
# =============================================================================
# Caches the result of a read by a logical key (e.g. "header-content") until
# that key is invalidated by a change notification for the underlying table.
#
# Usage:
#   cache = QueryCache()
#   rows = cache.get_or_fetch("categories", lambda: store.select("categories"))
#   cache.invalidate(["categories"])
# =============================================================================

from __future__ import annotations

import copy
import logging
import threading
import time
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)


class QueryCache:
    """
    In-process cache of query results keyed by name.

    Values are deep-copied on the way out so callers can't mutate the
    cached copy. A ttl of 0 keeps entries until they are invalidated.
    """

    def __init__(self, ttl_seconds: float = 0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _is_fresh(self, stored_at: float) -> bool:
        if not self.ttl_seconds:
            return True
        return (self._clock() - stored_at) < self.ttl_seconds

    def get(self, key: str) -> Any | None:
        """Return the cached value for key, or None when absent or stale."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if not self._is_fresh(stored_at):
                del self._entries[key]
                return None
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), copy.deepcopy(value))

    def get_or_fetch(self, key: str, fetcher: Callable[[], Any]) -> Any:
        """
        Return the cached value for key, calling fetcher on a miss.

        Fetcher exceptions propagate and nothing is cached, so a failed
        read never poisons the cache.
        """
        cached = self.get(key)
        if cached is not None:
            self.hits += 1
            logger.debug(f"Cache hit: {key}")
            return cached

        self.misses += 1
        logger.debug(f"Cache miss: {key}")
        value = fetcher()
        self.set(key, value)
        return copy.deepcopy(value)

    def invalidate(self, keys: Iterable[str]) -> list[str]:
        """
        Drop every listed key.

        Returns:
            The keys that were actually cached
        """
        dropped = []
        with self._lock:
            for key in keys:
                if self._entries.pop(key, None) is not None:
                    dropped.append(key)
        if dropped:
            logger.debug(f"Invalidated cache keys: {', '.join(dropped)}")
        return dropped

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries.keys())

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
