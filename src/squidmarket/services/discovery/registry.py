"""Known and verified collection registry.

Two distinct verification concepts live here:

- statically verified: the address is on the in-process allow-list;
- active launch: the address has a launch pool row in ACTIVE status.

Callers combine them explicitly through ``is_verified``.
"""

from collections.abc import Iterable
from typing import Any

import structlog

from squidmarket.constants.collections import KNOWN_COLLECTIONS
from squidmarket.data.models.collection import KnownCollection
from squidmarket.data.models.launch_pool import LaunchPool, LaunchStatus
from squidmarket.data.supabase.repositories.launch_pool_repo import LaunchPoolRepository

logger = structlog.get_logger(__name__)


class CollectionRegistry:
    """Lookup of verified collections.

    Example:
        registry = CollectionRegistry(launch_pools=LaunchPoolRepository(client))
        if await registry.is_verified(address, include_active_launches=True):
            ...
    """

    def __init__(
        self,
        known: Iterable[dict[str, Any] | KnownCollection] = KNOWN_COLLECTIONS,
        launch_pools: LaunchPoolRepository | None = None,
    ) -> None:
        """Initialize registry.

        Args:
            known: Static allow-list entries
            launch_pools: Launch pool repository; without it no launch is active
        """
        self._known: dict[str, KnownCollection] = {}
        for item in known:
            entry = item if isinstance(item, KnownCollection) else KnownCollection(**item)
            self._known[entry.address] = entry
        self.launch_pools = launch_pools

    def known_collections(self) -> list[KnownCollection]:
        """Statically known collections, in declaration order."""
        return list(self._known.values())

    def is_statically_verified(self, address: str) -> bool:
        entry = self._known.get(address.lower())
        return entry is not None and entry.verified

    def lookup(self, address: str) -> KnownCollection | None:
        """Static display metadata of ``address``, if known."""
        return self._known.get(address.lower())

    async def launch_pool(self, address: str) -> LaunchPool | None:
        """Launch pool row of ``address``, if it came from the launchpad."""
        if self.launch_pools is None:
            return None
        return await self.launch_pools.get_by_contract(address)

    async def is_active_launch(self, address: str) -> bool:
        """Whether ``address`` has an ACTIVE launch pool."""
        pool = await self.launch_pool(address)
        return pool is not None and pool.status == LaunchStatus.ACTIVE

    async def is_verified(self, address: str, include_active_launches: bool = False) -> bool:
        """Combine the static allow-list with, optionally, active launches."""
        if self.is_statically_verified(address):
            return True
        if include_active_launches:
            return await self.is_active_launch(address)
        return False

    async def launchpad_collections(self, active_only: bool = False) -> list[LaunchPool]:
        """Launch pools as a seed list of launchpad collections."""
        if self.launch_pools is None:
            return []
        status = LaunchStatus.ACTIVE if active_only else None
        pools = await self.launch_pools.list_all(status=status)
        logger.debug("launchpad_collections_loaded", count=len(pools), active_only=active_only)
        return pools
