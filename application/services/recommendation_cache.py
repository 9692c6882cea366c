"""Bounded, time-expiring LRU cache in front of an external recommendation lookup."""
from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

from domain.entities import CacheStats

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheKey = tuple[str, str, int]
Lookup = Callable[[str, int], Awaitable[T]]

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_ENTRIES = 100


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    key: CacheKey
    value: T
    created_at: float


def make_key(query: str, scope: str | None, limit: int) -> CacheKey:
    """Requests differing only in case or spacing share a key."""

    return (" ".join(query.split()).casefold(), scope or "", int(limit))


class RecommendationCache(Generic[T]):
    """Caches lookup results keyed by ``(query, scope, limit)``.

    Entries older than the TTL are dropped when read. When a new key would
    push the cache past ``max_entries`` the least recently used entry, by
    ``get`` hits and ``set`` calls, is evicted first.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[CacheKey, CacheEntry[T]] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, query: str, scope: str | None, limit: int) -> T | None:
        found, value = self._lookup(make_key(query, scope, limit))
        return value if found else None

    def set(self, query: str, scope: str | None, limit: int, value: T) -> None:
        key = make_key(query, scope, limit)
        with self._lock:
            if key not in self._entries and len(self._entries) >= self._max_entries:
                evicted, _entry = self._entries.popitem(last=False)
                logger.debug("Evicted least recently used entry %s", evicted)
            self._entries[key] = CacheEntry(key=key, value=value, created_at=self._clock())
            self._entries.move_to_end(key)

    def invalidate(self, query: str, scope: str | None, limit: int) -> bool:
        with self._lock:
            return self._entries.pop(make_key(query, scope, limit), None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Recommendation cache cleared")

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                max_entries=self._max_entries,
                hits=self._hits,
                misses=self._misses,
            )

    async def get_or_fetch(self, query: str, scope: str | None, limit: int, lookup: Lookup[T]) -> T:
        """Return the cached value or call ``lookup(query, limit)`` and cache it.

        Lookup errors propagate and nothing is cached for that key.
        """

        key = make_key(query, scope, limit)
        found, value = self._lookup(key)
        if found:
            return value
        result = await lookup(query, limit)
        self.set(query, scope, limit, result)
        return result

    def _lookup(self, key: CacheKey) -> tuple[bool, T | None]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return False, None
            if self._clock() - entry.created_at > self._ttl:
                del self._entries[key]
                self._misses += 1
                logger.debug("Expired cache entry %s", key)
                return False, None
            self._entries.move_to_end(key)
            self._hits += 1
        logger.debug("Cache hit for %s", key)
        return True, entry.value


__all__ = [
    "CacheEntry",
    "CacheKey",
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_TTL_SECONDS",
    "RecommendationCache",
    "make_key",
]
