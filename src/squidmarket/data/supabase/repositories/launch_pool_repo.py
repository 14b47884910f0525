"""Launch pool repository for Supabase.

Table schema: see LaunchPool.
"""

from datetime import UTC, datetime
from typing import Any

import structlog

from squidmarket.data.models.launch_pool import (
    LaunchPool,
    LaunchPoolCreate,
    LaunchPoolUpdate,
    LaunchStatus,
)
from squidmarket.data.supabase.client import SupabaseClient

log = structlog.get_logger(__name__)


class LaunchPoolRepository:
    """Repository for the ``launch_pools`` table.

    Discovery only reads these rows as a seed list of launchpad
    collections; writes come from the launch pool routes and the
    backfill and cleanup scripts.

    Example:
        repo = LaunchPoolRepository(await get_supabase_client())
        active = await repo.list_all(status=LaunchStatus.ACTIVE)
    """

    TABLE_NAME = "launch_pools"

    def __init__(self, client: SupabaseClient) -> None:
        """Initialize repository with Supabase client.

        Args:
            client: Connected SupabaseClient instance.
        """
        self._client = client

    async def list_all(self, status: LaunchStatus | None = None) -> list[LaunchPool]:
        """List launch pools, newest first.

        Args:
            status: Only return pools in this status.
        """
        query = self._client.client.table(self.TABLE_NAME).select("*")
        if status is not None:
            query = query.eq("status", status.value)

        result = await query.order("created_at", desc=True).execute()
        return [LaunchPool(**row) for row in result.data or []]

    async def get_by_contract(self, contract_address: str) -> LaunchPool | None:
        """Get the launch pool of a collection contract."""
        result = await (
            self._client.client.table(self.TABLE_NAME)
            .select("*")
            .eq("contract_address", contract_address.lower())
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return LaunchPool(**result.data[0])

    async def get_by_launch_id(self, launch_id: int) -> LaunchPool | None:
        """Get the launch pool of an on-chain launch id."""
        result = await (
            self._client.client.table(self.TABLE_NAME)
            .select("*")
            .eq("launch_id", launch_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return LaunchPool(**result.data[0])

    async def create(self, pool: LaunchPoolCreate) -> LaunchPool:
        """Insert a new launch pool.

        Raises:
            ValueError: If the insert returned no row.
        """
        record = pool.model_dump(mode="json")
        for key in ("contract_address", "launchpad_address", "creator"):
            record[key] = record[key].lower()

        result = await self._client.client.table(self.TABLE_NAME).insert(record).execute()
        if not result.data:
            msg = f"Failed to create launch pool {pool.launch_id}"
            raise ValueError(msg)

        log.info(
            "launch_pool_created",
            launch_id=pool.launch_id,
            contract=record["contract_address"],
        )
        return LaunchPool(**result.data[0])

    async def update(self, update: LaunchPoolUpdate) -> LaunchPool | None:
        """Apply a status update.

        Returns:
            Updated LaunchPool, or None if no row has that id.
        """
        changes: dict[str, Any] = update.model_dump(
            mode="json", exclude={"id"}, exclude_none=True
        )
        changes["updated_at"] = datetime.now(UTC).isoformat()

        result = await (
            self._client.client.table(self.TABLE_NAME)
            .update(changes)
            .eq("id", update.id)
            .execute()
        )
        if not result.data:
            return None

        log.info("launch_pool_updated", id=update.id, fields=sorted(changes))
        return LaunchPool(**result.data[0])

    async def delete_not_in(self, contract_addresses: list[str]) -> int:
        """Delete pools whose contract is not in ``contract_addresses``.

        Returns:
            Number of rows deleted.
        """
        query = self._client.client.table(self.TABLE_NAME).delete()
        if contract_addresses:
            query = query.not_.in_("contract_address", [a.lower() for a in contract_addresses])
        else:
            # PostgREST refuses an unfiltered DELETE
            query = query.neq("contract_address", "")

        result = await query.execute()
        count = len(result.data or [])
        log.info("launch_pools_deleted", count=count, kept=len(contract_addresses))
        return count
