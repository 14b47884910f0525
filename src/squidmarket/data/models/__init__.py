"""Pydantic models for data validation and serialization."""

from squidmarket.data.models.collection import (
    CacheEntry,
    CollectionSource,
    CollectionStats,
    CollectionSummary,
    KnownCollection,
)
from squidmarket.data.models.launch_pool import (
    LaunchPool,
    LaunchPoolCreate,
    LaunchPoolUpdate,
    LaunchStatus,
)
from squidmarket.data.models.listing import (
    BuyRequest,
    Listing,
    ListingDetails,
    ListRequest,
    UnsignedCall,
)
from squidmarket.data.models.nft import NFTAttribute, NFTRecord
from squidmarket.data.models.waitlist import WaitlistEntry, WaitlistSignup

__all__ = [
    "BuyRequest",
    "CacheEntry",
    "CollectionSource",
    "CollectionStats",
    "CollectionSummary",
    "KnownCollection",
    "LaunchPool",
    "LaunchPoolCreate",
    "LaunchPoolUpdate",
    "LaunchStatus",
    "ListRequest",
    "Listing",
    "ListingDetails",
    "NFTAttribute",
    "NFTRecord",
    "UnsignedCall",
    "WaitlistEntry",
    "WaitlistSignup",
]
