"""NFT repository for Supabase.

Persists scan results into the ``nfts`` table (schema on NFTRecord).
Rows are keyed by ``(collection_address, token_id)``; a re-scan
overwrites owner and metadata in place.
"""

from datetime import UTC, datetime
from typing import Any

import structlog

from squidmarket.data.models.nft import NFTRecord
from squidmarket.data.supabase.client import SupabaseClient

log = structlog.get_logger(__name__)

# Listing state comes from the marketplace contract, not from the table
_TRANSIENT_FIELDS = {"is_listed", "listing_price", "listing_id"}


class NFTRepository:
    """Repository for the ``nfts`` table.

    Example:
        repo = NFTRepository(await get_supabase_client())
        await repo.upsert_many(result.nfts)
        owned = await repo.get_by_owner("0xabc...")
    """

    TABLE_NAME = "nfts"

    def __init__(self, client: SupabaseClient) -> None:
        """Initialize repository with Supabase client.

        Args:
            client: Connected SupabaseClient instance.
        """
        self._client = client

    @staticmethod
    def _to_row(record: NFTRecord, updated_at: str) -> dict[str, Any]:
        row = record.model_dump(mode="json", exclude=_TRANSIENT_FIELDS)
        row["updated_at"] = updated_at
        return row

    async def upsert_many(self, records: list[NFTRecord]) -> int:
        """Upsert scan results in one request.

        Returns:
            Number of rows written.
        """
        if not records:
            return 0

        now = datetime.now(UTC).isoformat()
        rows = [self._to_row(r, now) for r in records]
        result = await (
            self._client.client.table(self.TABLE_NAME)
            .upsert(rows, on_conflict="collection_address,token_id")
            .execute()
        )
        count = len(result.data or [])
        log.info(
            "nfts_upserted",
            count=count,
            collections=sorted({r.collection_address for r in records}),
        )
        return count

    async def get_by_owner(self, owner: str, limit: int = 500) -> list[NFTRecord]:
        """NFTs currently recorded as owned by ``owner``."""
        result = await (
            self._client.client.table(self.TABLE_NAME)
            .select("*")
            .eq("owner", owner.lower())
            .order("collection_address")
            .order("token_id")
            .limit(limit)
            .execute()
        )
        return [NFTRecord(**row) for row in result.data or []]

    async def delete_by_collections_not_in(self, collection_addresses: list[str]) -> int:
        """Delete NFTs whose collection is not in ``collection_addresses``.

        Returns:
            Number of rows deleted.
        """
        query = self._client.client.table(self.TABLE_NAME).delete()
        if collection_addresses:
            query = query.not_.in_(
                "collection_address", [a.lower() for a in collection_addresses]
            )
        else:
            # PostgREST refuses an unfiltered DELETE
            query = query.neq("collection_address", "")

        result = await query.execute()
        count = len(result.data or [])
        log.info("nfts_deleted", count=count, kept_collections=len(collection_addresses))
        return count
