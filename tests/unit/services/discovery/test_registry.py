"""Tests for the known/verified collection registry."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from squidmarket.constants.collections import KNOWN_COLLECTIONS
from squidmarket.data.models.launch_pool import LaunchStatus
from squidmarket.services.discovery.registry import CollectionRegistry
from tests.factories import LaunchPoolFactory

VERIFIED = "0x" + "aa" * 20
UNVERIFIED = "0x" + "bb" * 20


@pytest.fixture
def launch_pools() -> MagicMock:
    repo = MagicMock()
    repo.get_by_contract = AsyncMock(return_value=None)
    repo.list_all = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def registry(launch_pools: MagicMock) -> CollectionRegistry:
    return CollectionRegistry(
        known=[
            {"address": VERIFIED.upper().replace("0X", "0x"), "name": "Verified", "symbol": "V"},
            {"address": UNVERIFIED, "name": "Listed", "verified": False},
        ],
        launch_pools=launch_pools,
    )


class TestStaticVerification:
    """Tests for the static allow-list."""

    def test_default_registry_loads_known_collections(self) -> None:
        registry = CollectionRegistry()

        assert len(registry.known_collections()) == len(KNOWN_COLLECTIONS)
        first = KNOWN_COLLECTIONS[0]["address"]
        assert registry.is_statically_verified(first.upper().replace("0X", "0x"))

    def test_lookup_is_case_insensitive(self, registry: CollectionRegistry) -> None:
        entry = registry.lookup(VERIFIED.upper().replace("0X", "0x"))

        assert entry is not None
        assert entry.name == "Verified"

    def test_unverified_known_entry_is_not_verified(self, registry: CollectionRegistry) -> None:
        assert registry.lookup(UNVERIFIED) is not None
        assert registry.is_statically_verified(UNVERIFIED) is False


class TestLaunchVerification:
    """Tests for launch pool based verification."""

    @pytest.mark.asyncio
    async def test_active_launch_counts_only_when_requested(
        self, registry: CollectionRegistry, launch_pools: MagicMock
    ) -> None:
        """
        Given: An address with an ACTIVE launch pool but not on the allow-list
        When: Verification is checked with and without active launches
        Then: Only the inclusive check verifies it
        """
        address = "0x" + "12" * 20
        launch_pools.get_by_contract.return_value = LaunchPoolFactory(
            contract_address=address, status=LaunchStatus.ACTIVE
        )

        assert await registry.is_verified(address) is False
        assert await registry.is_verified(address, include_active_launches=True) is True

    @pytest.mark.asyncio
    async def test_pending_launch_is_not_active(
        self, registry: CollectionRegistry, launch_pools: MagicMock
    ) -> None:
        launch_pools.get_by_contract.return_value = LaunchPoolFactory(status=LaunchStatus.PENDING)

        assert await registry.is_active_launch("0x" + "12" * 20) is False

    @pytest.mark.asyncio
    async def test_static_verification_needs_no_lookup(
        self, registry: CollectionRegistry, launch_pools: MagicMock
    ) -> None:
        assert await registry.is_verified(VERIFIED, include_active_launches=True) is True
        launch_pools.get_by_contract.assert_not_called()

    @pytest.mark.asyncio
    async def test_launchpad_collections_filters_active(
        self, registry: CollectionRegistry, launch_pools: MagicMock
    ) -> None:
        await registry.launchpad_collections(active_only=True)

        launch_pools.list_all.assert_awaited_once_with(status=LaunchStatus.ACTIVE)

    @pytest.mark.asyncio
    async def test_without_repository_there_are_no_launches(self) -> None:
        registry = CollectionRegistry(known=[])

        assert await registry.launch_pool(VERIFIED) is None
        assert await registry.launchpad_collections() == []
