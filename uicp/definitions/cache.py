"""Definitions cache: time-bounded memoization of loaded definitions.

Keyed by the exact source locator string. Inline Definitions objects are
never cached. Concurrent misses for the same locator share one in-flight
load, and that load is shielded from caller cancellation so it still
populates the cache when the caller goes away.
"""

import asyncio
import logging
import os
import time
from typing import Callable, Optional

from .schemas import Definitions
from .sources import DefinitionsLoader, DefinitionsSource, get_definitions_loader

logger = logging.getLogger(__name__)

# Cache TTL: 5 minutes
DEFAULT_CACHE_TTL = float(os.environ.get("UICP_CACHE_TTL", "300"))


class CacheEntry:
    """Cached definitions with the time they were stored."""

    __slots__ = ("data", "timestamp")

    def __init__(self, data: Definitions, timestamp: float):
        self.data = data
        self.timestamp = timestamp

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.timestamp < ttl


class DefinitionsCache:
    """In-memory definitions cache with per-read TTL.

    Not thread-safe: all reads and writes happen on the event loop thread.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task] = {}

    def get(self, source: str, ttl: float = DEFAULT_CACHE_TTL) -> Optional[Definitions]:
        """Get cached definitions if younger than ttl; stale entries are evicted."""
        entry = self._entries.get(source)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), ttl):
            del self._entries[source]
            return None
        return entry.data

    def set(self, source: str, data: Definitions) -> None:
        """Store definitions with a fresh timestamp."""
        self._entries[source] = CacheEntry(data, self._clock())

    def clear(self, source: Optional[str] = None) -> None:
        """Clear one entry, or everything when source is omitted."""
        if source is not None:
            self._entries.pop(source, None)
        else:
            self._entries.clear()

    def stats(self) -> dict:
        """Cache size and cached locators."""
        return {
            "size": len(self._entries),
            "entries": list(self._entries.keys()),
        }

    async def load_cached(
        self,
        source: DefinitionsSource,
        loader: Optional[DefinitionsLoader] = None,
        ttl: float = DEFAULT_CACHE_TTL,
    ) -> Definitions:
        """Load definitions, reusing a cached copy younger than ttl."""
        loader = loader or get_definitions_loader()
        if not isinstance(source, str):
            return await loader.load(source)

        cached = self.get(source, ttl)
        if cached is not None:
            logger.debug(f"Definitions cache hit: {source}")
            return cached

        task = self._inflight.get(source)
        if task is None:
            logger.debug(f"Definitions cache miss: {source}")
            task = asyncio.ensure_future(self._load_and_store(source, loader))
            self._inflight[source] = task
            task.add_done_callback(lambda _: self._inflight.pop(source, None))
        return await asyncio.shield(task)

    async def _load_and_store(self, source: str, loader: DefinitionsLoader) -> Definitions:
        data = await loader.load(source)
        self.set(source, data)
        return data


# Global cache instance
_cache: Optional[DefinitionsCache] = None


def get_definitions_cache() -> DefinitionsCache:
    """Get the global definitions cache instance."""
    global _cache
    if _cache is None:
        _cache = DefinitionsCache()
    return _cache


async def load_definitions_cached(
    source: DefinitionsSource,
    ttl: float = DEFAULT_CACHE_TTL,
) -> Definitions:
    """Load definitions through the global cache and loader."""
    return await get_definitions_cache().load_cached(source, ttl=ttl)


def clear_definitions_cache(source: Optional[str] = None) -> None:
    """Clear the global definitions cache."""
    get_definitions_cache().clear(source)
