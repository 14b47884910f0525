"""Collection cache repository for Supabase.

Backs the discovery CollectionCache with the ``collection_cache`` table
(schema on CacheEntry). Writes are single-row upserts keyed by the
lowercased address, so repeating one is harmless.
"""

from typing import Any

import structlog

from squidmarket.data.models.collection import CacheEntry
from squidmarket.data.supabase.client import SupabaseClient

log = structlog.get_logger(__name__)


class CollectionCacheRepository:
    """Repository for the ``collection_cache`` table.

    Example:
        client = await get_supabase_client()
        cache = CollectionCache(CollectionCacheRepository(client))
    """

    TABLE_NAME = "collection_cache"

    def __init__(self, client: SupabaseClient) -> None:
        """Initialize repository with Supabase client.

        Args:
            client: Connected SupabaseClient instance.
        """
        self._client = client

    async def get_entry(self, address: str) -> CacheEntry | None:
        """Get the cache row of ``address``, fresh or not."""
        result = await (
            self._client.client.table(self.TABLE_NAME)
            .select("*")
            .eq("address", address.lower())
            .maybe_single()
            .execute()
        )
        if result is None or not result.data:
            return None
        return CacheEntry(**result.data)

    async def upsert_entry(self, entry: CacheEntry) -> None:
        """Insert or overwrite the row of ``entry.address``."""
        record: dict[str, Any] = {
            "address": entry.address,
            "name": entry.name,
            "symbol": entry.symbol,
            "total_supply": entry.total_supply,
            "max_supply": entry.max_supply,
            "image": entry.image,
            "updated_at": entry.updated_at.isoformat(),
        }
        await (
            self._client.client.table(self.TABLE_NAME)
            .upsert(record, on_conflict="address")
            .execute()
        )

    async def delete_entry(self, address: str) -> None:
        """Delete the row of ``address`` if present."""
        await (
            self._client.client.table(self.TABLE_NAME)
            .delete()
            .eq("address", address.lower())
            .execute()
        )

    async def delete_all(self) -> int:
        """Delete every row.

        Returns:
            Number of rows deleted.
        """
        # PostgREST refuses an unfiltered DELETE
        result = await (
            self._client.client.table(self.TABLE_NAME)
            .delete()
            .neq("address", "")
            .execute()
        )
        count = len(result.data or [])
        log.info("collection_cache_rows_deleted", count=count)
        return count
