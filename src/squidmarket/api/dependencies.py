"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends
from web3 import Web3

from squidmarket.config.settings import Settings, get_settings
from squidmarket.core.exceptions import ValidationError
from squidmarket.data.supabase.client import get_supabase_client
from squidmarket.data.supabase.repositories.launch_pool_repo import LaunchPoolRepository
from squidmarket.data.supabase.repositories.nft_repo import NFTRepository
from squidmarket.data.supabase.repositories.waitlist_repo import WaitlistRepository
from squidmarket.services.discovery.service import DiscoveryService, create_discovery_service
from squidmarket.services.marketplace.transactions import MarketplaceTransactionBuilder

SettingsDep = Annotated[Settings, Depends(get_settings)]


def require_address(value: str | None, field: str = "address") -> str:
    """Validate and lowercase a chain address taken from a request.

    Raises:
        ValidationError: If the value is missing or not a hex address.
    """
    if not value:
        raise ValidationError(f"{field.capitalize()} address required")
    if not Web3.is_address(value):
        raise ValidationError(f"Invalid {field} address: {value}")
    return value.lower()


async def get_discovery_service() -> DiscoveryService:
    """Get discovery service dependency."""
    return await create_discovery_service()


async def get_launch_pool_repo() -> LaunchPoolRepository:
    """Get launch pool repository dependency."""
    client = await get_supabase_client()
    return LaunchPoolRepository(client)


async def get_nft_repo() -> NFTRepository:
    """Get NFT repository dependency."""
    client = await get_supabase_client()
    return NFTRepository(client)


async def get_waitlist_repo() -> WaitlistRepository:
    """Get waitlist repository dependency."""
    client = await get_supabase_client()
    return WaitlistRepository(client)


def get_transaction_builder() -> MarketplaceTransactionBuilder:
    """Get marketplace transaction builder dependency."""
    return MarketplaceTransactionBuilder(get_settings().marketplace_address)


DiscoveryServiceDep = Annotated[DiscoveryService, Depends(get_discovery_service)]
LaunchPoolRepoDep = Annotated[LaunchPoolRepository, Depends(get_launch_pool_repo)]
NFTRepoDep = Annotated[NFTRepository, Depends(get_nft_repo)]
WaitlistRepoDep = Annotated[WaitlistRepository, Depends(get_waitlist_repo)]
TransactionBuilderDep = Annotated[
    MarketplaceTransactionBuilder, Depends(get_transaction_builder)
]
