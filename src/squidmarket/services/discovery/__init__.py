"""Collection and NFT discovery pipeline."""

from squidmarket.services.discovery.cache import (
    CollectionCache,
    CollectionCacheStore,
    InMemoryCollectionStore,
)
from squidmarket.services.discovery.introspector import (
    CollectionIntrospector,
    ERC721AccessorStrategy,
    RichAccessorStrategy,
)
from squidmarket.services.discovery.listings import ListingLookup
from squidmarket.services.discovery.metadata import (
    MetadataResolver,
    TokenMetadata,
    close_metadata_resolver,
    get_metadata_resolver,
    rewrite_ipfs,
)
from squidmarket.services.discovery.prober import ProbeOutcome, ProbeResult, TokenProber
from squidmarket.services.discovery.registry import CollectionRegistry
from squidmarket.services.discovery.scanner import (
    ScanOptions,
    ScanOrchestrator,
    ScanResult,
    ScanWindow,
    sort_records,
)
from squidmarket.services.discovery.service import (
    DiscoveryService,
    MarketplacePage,
    create_discovery_service,
)

__all__ = [
    "CollectionCache",
    "CollectionCacheStore",
    "CollectionIntrospector",
    "CollectionRegistry",
    "DiscoveryService",
    "ERC721AccessorStrategy",
    "InMemoryCollectionStore",
    "ListingLookup",
    "MarketplacePage",
    "MetadataResolver",
    "ProbeOutcome",
    "ProbeResult",
    "RichAccessorStrategy",
    "ScanOptions",
    "ScanOrchestrator",
    "ScanResult",
    "ScanWindow",
    "TokenMetadata",
    "TokenProber",
    "close_metadata_resolver",
    "create_discovery_service",
    "get_metadata_resolver",
    "rewrite_ipfs",
    "sort_records",
]
