"""Unit tests for the Supabase repositories.

Tests cover:
- Collection cache rows (get, upsert, clear)
- Launch pool lookups and cleanup
- NFT upserts without listing state
- Waitlist duplicate detection
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from postgrest.exceptions import APIError

from squidmarket.core.exceptions import DuplicateEntryError
from squidmarket.data.models.collection import CacheEntry
from squidmarket.data.models.launch_pool import LaunchPoolUpdate, LaunchStatus
from squidmarket.data.models.waitlist import WaitlistSignup
from squidmarket.data.supabase.repositories import (
    CollectionCacheRepository,
    LaunchPoolRepository,
    NFTRepository,
    WaitlistRepository,
)
from tests.factories import NFTRecordFactory

COLLECTION = "0x" + "ab" * 20


def _result(data=None, count=None) -> MagicMock:
    result = MagicMock()
    result.data = data
    result.count = count
    return result


class TestCollectionCacheRepository:
    """Tests for CollectionCacheRepository."""

    @pytest.mark.asyncio
    async def test_get_entry_returns_row(self, mock_supabase_client: MagicMock) -> None:
        row = {
            "address": COLLECTION,
            "name": "Squids",
            "symbol": "SQD",
            "total_supply": 3,
            "max_supply": None,
            "image": None,
            "updated_at": "2024-01-01T00:00:00+00:00",
        }
        chain = mock_supabase_client.client.table.return_value.select.return_value
        chain.eq.return_value.maybe_single.return_value.execute = AsyncMock(
            return_value=_result(row)
        )

        entry = await CollectionCacheRepository(mock_supabase_client).get_entry(
            COLLECTION.upper().replace("0X", "0x")
        )

        assert entry is not None
        assert entry.name == "Squids"
        chain.eq.assert_called_once_with("address", COLLECTION)

    @pytest.mark.asyncio
    async def test_get_entry_missing_row(self, mock_supabase_client: MagicMock) -> None:
        chain = mock_supabase_client.client.table.return_value.select.return_value
        chain.eq.return_value.maybe_single.return_value.execute = AsyncMock(return_value=None)

        assert await CollectionCacheRepository(mock_supabase_client).get_entry(COLLECTION) is None

    @pytest.mark.asyncio
    async def test_upsert_is_keyed_by_address(self, mock_supabase_client: MagicMock) -> None:
        table = mock_supabase_client.client.table.return_value
        table.upsert.return_value.execute = AsyncMock(return_value=_result([]))
        entry = CacheEntry(
            address=COLLECTION,
            name="A",
            max_supply=500,
            updated_at=datetime(2024, 1, 1, tzinfo=UTC),
        )

        await CollectionCacheRepository(mock_supabase_client).upsert_entry(entry)

        record = table.upsert.call_args.args[0]
        assert record["address"] == COLLECTION
        assert record["max_supply"] == 500
        assert record["updated_at"] == "2024-01-01T00:00:00+00:00"
        assert table.upsert.call_args.kwargs == {"on_conflict": "address"}

    @pytest.mark.asyncio
    async def test_delete_all_counts_rows(self, mock_supabase_client: MagicMock) -> None:
        table = mock_supabase_client.client.table.return_value
        table.delete.return_value.neq.return_value.execute = AsyncMock(
            return_value=_result([{"address": "0x1"}, {"address": "0x2"}])
        )

        assert await CollectionCacheRepository(mock_supabase_client).delete_all() == 2


class TestLaunchPoolRepository:
    """Tests for LaunchPoolRepository."""

    @pytest.mark.asyncio
    async def test_list_all_filters_status(self, mock_supabase_client: MagicMock) -> None:
        query = mock_supabase_client.client.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute = AsyncMock(return_value=_result([]))

        pools = await LaunchPoolRepository(mock_supabase_client).list_all(LaunchStatus.ACTIVE)

        assert pools == []
        query.eq.assert_called_once_with("status", "ACTIVE")

    @pytest.mark.asyncio
    async def test_update_of_unknown_id_is_none(self, mock_supabase_client: MagicMock) -> None:
        table = mock_supabase_client.client.table.return_value
        table.update.return_value.eq.return_value.execute = AsyncMock(return_value=_result([]))

        updated = await LaunchPoolRepository(mock_supabase_client).update(
            LaunchPoolUpdate(id="missing", status=LaunchStatus.ACTIVE)
        )

        assert updated is None
        changes = table.update.call_args.args[0]
        assert changes["status"] == "ACTIVE"
        assert "updated_at" in changes

    @pytest.mark.asyncio
    async def test_delete_not_in_keeps_listed_contracts(
        self, mock_supabase_client: MagicMock
    ) -> None:
        delete = mock_supabase_client.client.table.return_value.delete.return_value
        delete.not_.in_.return_value.execute = AsyncMock(return_value=_result([{"id": "1"}]))

        deleted = await LaunchPoolRepository(mock_supabase_client).delete_not_in(["0xABC"])

        assert deleted == 1
        delete.not_.in_.assert_called_once_with("contract_address", ["0xabc"])


class TestNFTRepository:
    """Tests for NFTRepository."""

    @pytest.mark.asyncio
    async def test_upsert_many_drops_listing_state(self, mock_supabase_client: MagicMock) -> None:
        table = mock_supabase_client.client.table.return_value
        table.upsert.return_value.execute = AsyncMock(return_value=_result([{}, {}]))
        records = [NFTRecordFactory(is_listed=True, listing_id=1), NFTRecordFactory()]

        written = await NFTRepository(mock_supabase_client).upsert_many(records)

        assert written == 2
        rows = table.upsert.call_args.args[0]
        assert "is_listed" not in rows[0]
        assert "listing_id" not in rows[0]
        assert "updated_at" in rows[0]
        assert table.upsert.call_args.kwargs == {"on_conflict": "collection_address,token_id"}

    @pytest.mark.asyncio
    async def test_upsert_nothing_skips_request(self, mock_supabase_client: MagicMock) -> None:
        assert await NFTRepository(mock_supabase_client).upsert_many([]) == 0
        mock_supabase_client.client.table.assert_not_called()


class TestWaitlistRepository:
    """Tests for WaitlistRepository."""

    @pytest.mark.asyncio
    async def test_add_returns_entry(self, mock_supabase_client: MagicMock) -> None:
        table = mock_supabase_client.client.table.return_value
        table.insert.return_value.execute = AsyncMock(
            return_value=_result([{"id": "w1", "email": "me@example.com", "wallet": None}])
        )

        entry = await WaitlistRepository(mock_supabase_client).add(
            WaitlistSignup(email="me@example.com")
        )

        assert entry.id == "w1"

    @pytest.mark.asyncio
    async def test_duplicate_email_raises(self, mock_supabase_client: MagicMock) -> None:
        """
        Given: The email is already on the waitlist
        When: It is added again
        Then: DuplicateEntryError is raised for the waitlist table
        """
        table = mock_supabase_client.client.table.return_value
        table.insert.return_value.execute = AsyncMock(
            side_effect=APIError({"code": "23505", "message": "duplicate key value"})
        )

        with pytest.raises(DuplicateEntryError) as exc_info:
            await WaitlistRepository(mock_supabase_client).add(
                WaitlistSignup(email="me@example.com")
            )

        assert exc_info.value.table == "waitlist"

    @pytest.mark.asyncio
    async def test_other_database_errors_propagate(
        self, mock_supabase_client: MagicMock
    ) -> None:
        table = mock_supabase_client.client.table.return_value
        table.insert.return_value.execute = AsyncMock(
            side_effect=APIError({"code": "42P01", "message": "relation does not exist"})
        )

        with pytest.raises(APIError):
            await WaitlistRepository(mock_supabase_client).add(
                WaitlistSignup(email="me@example.com")
            )

    @pytest.mark.asyncio
    async def test_count(self, mock_supabase_client: MagicMock) -> None:
        select = mock_supabase_client.client.table.return_value.select.return_value
        select.limit.return_value.execute = AsyncMock(return_value=_result([], count=12))

        assert await WaitlistRepository(mock_supabase_client).count() == 12
