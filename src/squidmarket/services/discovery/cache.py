"""Time-bounded collection summary cache over an injectable store."""

import asyncio
from collections import OrderedDict
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

import structlog

from squidmarket.constants.discovery import (
    COLLECTION_CACHE_MAX_SIZE,
    COLLECTION_CACHE_TTL_SECONDS,
)
from squidmarket.data.models.collection import CacheEntry, CollectionSummary

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class CollectionCacheStore(Protocol):
    """Persistence backend of the collection cache."""

    async def get_entry(self, address: str) -> CacheEntry | None: ...

    async def upsert_entry(self, entry: CacheEntry) -> None: ...

    async def delete_entry(self, address: str) -> None: ...

    async def delete_all(self) -> int: ...


class InMemoryCollectionStore:
    """Process-local LRU store, for tests and one-off jobs."""

    def __init__(self, max_size: int = COLLECTION_CACHE_MAX_SIZE) -> None:
        self.max_size = max_size
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def get_entry(self, address: str) -> CacheEntry | None:
        async with self._lock:
            entry = self._entries.get(address)
            if entry is not None:
                self._entries.move_to_end(address)
            return entry

    async def upsert_entry(self, entry: CacheEntry) -> None:
        async with self._lock:
            self._entries[entry.address] = entry
            self._entries.move_to_end(entry.address)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    async def delete_entry(self, address: str) -> None:
        async with self._lock:
            self._entries.pop(address, None)

    async def delete_all(self) -> int:
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count


class CollectionCache:
    """Collection summaries with a freshness window.

    An entry is served iff ``now - updated_at < ttl``; stale entries are
    reported as a miss and left for the next ``put`` to overwrite.
    ``put`` is an upsert on the lowercased address that always stamps
    the clock's current time, so concurrent writers race harmlessly
    (last write wins).
    """

    def __init__(
        self,
        store: CollectionCacheStore,
        ttl_seconds: int = COLLECTION_CACHE_TTL_SECONDS,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize collection cache.

        Args:
            store: Backend holding cache entries
            ttl_seconds: Freshness window
            clock: Source of the current time (injectable for tests)
        """
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._hits = 0
        self._misses = 0

    async def get(self, address: str) -> CollectionSummary | None:
        """Get a fresh summary for ``address``.

        Args:
            address: Collection contract address

        Returns:
            CollectionSummary if cached and fresh, None otherwise
        """
        address = address.lower()
        entry = await self.store.get_entry(address)

        if entry is None or not entry.is_fresh(self.clock(), self.ttl_seconds):
            self._misses += 1
            return None

        self._hits += 1
        logger.debug("collection_cache_hit", address=address)
        return entry.to_summary()

    async def put(self, summary: CollectionSummary) -> CacheEntry:
        """Upsert ``summary`` stamped with the current time."""
        entry = CacheEntry.from_summary(summary, updated_at=self.clock())
        await self.store.upsert_entry(entry)
        logger.debug("collection_cache_put", address=entry.address)
        return entry

    async def invalidate(self, address: str) -> None:
        """Drop the entry of ``address``."""
        await self.store.delete_entry(address.lower())

    async def clear(self) -> int:
        """Drop every entry (administrative cache clear).

        Returns:
            Number of entries removed
        """
        removed = await self.store.delete_all()
        self._hits = 0
        self._misses = 0
        logger.info("collection_cache_cleared", removed=removed)
        return removed

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            dict with cache stats
        """
        total = self._hits + self._misses
        hit_rate = self._hits / total if total > 0 else 0.0

        return {
            "ttl_seconds": self.ttl_seconds,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 4),
        }
