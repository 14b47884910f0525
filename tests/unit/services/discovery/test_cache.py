"""Tests for the collection summary cache."""

from datetime import UTC, datetime, timedelta

import pytest

from squidmarket.data.models.collection import CollectionSummary
from squidmarket.services.discovery.cache import CollectionCache, InMemoryCollectionStore

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class Clock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def store() -> InMemoryCollectionStore:
    return InMemoryCollectionStore()


@pytest.fixture
def cache(store: InMemoryCollectionStore, clock: Clock) -> CollectionCache:
    return CollectionCache(store, ttl_seconds=3600, clock=clock)


def _summary(address: str = "0xABC", name: str = "Test") -> CollectionSummary:
    return CollectionSummary(address=address, name=name, symbol="TST", total_supply=3)


class TestCollectionCacheFreshness:
    """Tests for the TTL boundary."""

    @pytest.mark.asyncio
    async def test_entry_is_served_just_before_expiry(
        self, cache: CollectionCache, clock: Clock
    ) -> None:
        """
        Given: An entry written at T0 with a one hour TTL
        When: Read at T0 + 3599s
        Then: The cached summary is returned
        """
        await cache.put(_summary())
        clock.advance(3599)

        summary = await cache.get("0xabc")

        assert summary is not None
        assert summary.name == "Test"
        assert summary.total_supply == 3

    @pytest.mark.asyncio
    async def test_entry_is_a_miss_just_after_expiry(
        self, cache: CollectionCache, clock: Clock
    ) -> None:
        """
        Given: An entry written at T0 with a one hour TTL
        When: Read at T0 + 3601s
        Then: It is reported as a miss
        """
        await cache.put(_summary())
        clock.advance(3601)

        assert await cache.get("0xabc") is None

    @pytest.mark.asyncio
    async def test_entry_expires_exactly_at_ttl(
        self, cache: CollectionCache, clock: Clock
    ) -> None:
        await cache.put(_summary())
        clock.advance(3600)

        assert await cache.get("0xabc") is None

    @pytest.mark.asyncio
    async def test_unknown_address_is_a_miss(self, cache: CollectionCache) -> None:
        assert await cache.get("0xnothing") is None


class TestCollectionCacheWrites:
    """Tests for put, invalidate and clear."""

    @pytest.mark.asyncio
    async def test_put_is_an_idempotent_upsert(
        self, cache: CollectionCache, store: InMemoryCollectionStore, clock: Clock
    ) -> None:
        """
        Given: The same address put twice
        When: The cache is read
        Then: One entry exists holding the last write
        """
        await cache.put(_summary(name="First"))
        clock.advance(10)
        entry = await cache.put(_summary(name="Second"))

        assert len(store) == 1
        assert entry.updated_at == T0 + timedelta(seconds=10)
        summary = await cache.get("0xabc")
        assert summary is not None
        assert summary.name == "Second"

    @pytest.mark.asyncio
    async def test_keys_are_case_insensitive(self, cache: CollectionCache) -> None:
        await cache.put(_summary(address="0xAbCdEf"))

        assert await cache.get("0xABCDEF") is not None

    @pytest.mark.asyncio
    async def test_rewrite_refreshes_a_stale_entry(
        self, cache: CollectionCache, clock: Clock
    ) -> None:
        await cache.put(_summary())
        clock.advance(7200)
        assert await cache.get("0xabc") is None

        await cache.put(_summary(name="Fresh"))

        summary = await cache.get("0xabc")
        assert summary is not None
        assert summary.name == "Fresh"

    @pytest.mark.asyncio
    async def test_invalidate_removes_entry(self, cache: CollectionCache) -> None:
        await cache.put(_summary())

        await cache.invalidate("0xABC")

        assert await cache.get("0xabc") is None

    @pytest.mark.asyncio
    async def test_clear_removes_everything_and_resets_stats(
        self, cache: CollectionCache
    ) -> None:
        await cache.put(_summary(address="0x1"))
        await cache.put(_summary(address="0x2"))
        await cache.get("0x1")

        removed = await cache.clear()

        assert removed == 2
        assert await cache.get("0x1") is None
        stats = cache.get_stats()
        assert stats["hits"] == 0
        assert stats["misses"] == 1


class TestCollectionCacheStats:
    """Tests for get_stats."""

    @pytest.mark.asyncio
    async def test_hit_rate(self, cache: CollectionCache) -> None:
        await cache.put(_summary())
        await cache.get("0xabc")
        await cache.get("0xabc")
        await cache.get("0xother")

        stats = cache.get_stats()

        assert stats["hits"] == 2
        assert stats["misses"] == 1
        assert stats["hit_rate"] == pytest.approx(0.6667)
        assert stats["ttl_seconds"] == 3600


class TestInMemoryCollectionStore:
    """Tests for the in-process LRU store."""

    @pytest.mark.asyncio
    async def test_evicts_least_recently_used(self, clock: Clock) -> None:
        store = InMemoryCollectionStore(max_size=2)
        cache = CollectionCache(store, clock=clock)
        await cache.put(_summary(address="0x1"))
        await cache.put(_summary(address="0x2"))
        await cache.get("0x1")

        await cache.put(_summary(address="0x3"))

        assert len(store) == 2
        assert await cache.get("0x2") is None
        assert await cache.get("0x1") is not None
