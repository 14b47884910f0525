"""Repository pattern implementations."""

from squidmarket.data.supabase.repositories.collection_cache_repo import (
    CollectionCacheRepository,
)
from squidmarket.data.supabase.repositories.launch_pool_repo import LaunchPoolRepository
from squidmarket.data.supabase.repositories.nft_repo import NFTRepository
from squidmarket.data.supabase.repositories.waitlist_repo import WaitlistRepository

__all__ = [
    "CollectionCacheRepository",
    "LaunchPoolRepository",
    "NFTRepository",
    "WaitlistRepository",
]
