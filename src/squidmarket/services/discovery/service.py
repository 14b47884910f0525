"""Discovery facade used by the HTTP routes and maintenance scripts.

Control flow for every collection view:
    cache -> (miss) introspect + preview image -> cache put
          -> registry decoration (verified, source, display fallbacks)
          -> scan -> listing annotation
"""

from dataclasses import dataclass, field

import structlog

from squidmarket.config.settings import Settings, get_settings
from squidmarket.constants.discovery import (
    HOLDER_SAMPLE_SIZE,
    KNOWN_COLLECTION_SCAN_LIMIT,
    MAX_PREVIEW_COUNT,
    PLACEHOLDER_IMAGE,
    PREVIEW_IMAGE_PROBES,
    UNKNOWN_COLLECTION_NAME,
    UNKNOWN_COLLECTION_SYMBOL,
)
from squidmarket.core.exceptions import ConfigurationError, SquidMarketError
from squidmarket.data.models.collection import (
    CollectionSource,
    CollectionStats,
    CollectionSummary,
)
from squidmarket.data.models.launch_pool import LaunchStatus
from squidmarket.data.models.listing import ListingDetails
from squidmarket.data.models.nft import NFTRecord
from squidmarket.data.supabase.client import get_supabase_client
from squidmarket.data.supabase.repositories.collection_cache_repo import (
    CollectionCacheRepository,
)
from squidmarket.data.supabase.repositories.launch_pool_repo import LaunchPoolRepository
from squidmarket.services.discovery.cache import CollectionCache
from squidmarket.services.discovery.introspector import CollectionIntrospector
from squidmarket.services.discovery.listings import ListingLookup
from squidmarket.services.discovery.metadata import MetadataResolver, get_metadata_resolver
from squidmarket.services.discovery.registry import CollectionRegistry
from squidmarket.services.discovery.scanner import (
    ScanOptions,
    ScanOrchestrator,
    ScanResult,
    ScanWindow,
    sort_records,
)
from squidmarket.services.evm.contracts import ContractReader
from squidmarket.services.evm.rpc_client import get_rpc_client

logger = structlog.get_logger(__name__)


@dataclass
class MarketplacePage:
    """One page of the marketplace-wide NFT view."""

    items: list[NFTRecord] = field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int = 0

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total


class DiscoveryService:
    """Collection and NFT discovery backed by chain reads and a cache.

    Example:
        service = DiscoveryService(reader, cache, registry, resolver, listings)
        summary = await service.get_collection_summary("0xabc...")
        result = await service.collection_nfts("0xabc...", limit=50)
    """

    def __init__(
        self,
        reader: ContractReader,
        cache: CollectionCache,
        registry: CollectionRegistry,
        resolver: MetadataResolver,
        listings: ListingLookup | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize discovery service.

        Args:
            reader: Contract reader over the RPC client
            cache: Collection summary cache
            registry: Known/verified collection registry
            resolver: Token metadata resolver
            listings: Marketplace listing lookup (records stay unlisted without it)
            settings: Configuration (defaults to get_settings())
        """
        self.settings = settings or get_settings()
        self.reader = reader
        self.cache = cache
        self.registry = registry
        self.resolver = resolver
        self.listings = listings
        self.introspector = CollectionIntrospector(reader)
        self.scanner = ScanOrchestrator(reader, resolver, introspector=self.introspector)

    def scan_options(self, **overrides: object) -> ScanOptions:
        """Configured scan options with per-call overrides."""
        return ScanOptions.from_settings(self.settings, **overrides)

    async def get_collection_summary(self, address: str) -> CollectionSummary:
        """Cached summary of a collection, introspected on a miss.

        Summaries of collections that answered no accessor are returned
        but never cached.
        """
        address = address.lower()
        summary = await self.cache.get(address)

        if summary is None:
            summary = await self.introspector.introspect(address)
            if summary.introspectable:
                if summary.image:
                    image = self.resolver.rewrite(summary.image)
                else:
                    image = await self._preview_image(summary)
                summary = summary.model_copy(update={"image": image})
                await self.cache.put(summary)

        return await self._decorate(summary)

    async def _preview_image(self, summary: CollectionSummary) -> str | None:
        """First metadata image among the earliest tokens."""
        if summary.total_supply <= 0:
            return None

        ids = range(min(PREVIEW_IMAGE_PROBES, summary.total_supply))
        result = await self.scanner.scan_ids(
            summary, ids, ScanOptions(limit=1, require_image=True)
        )
        return result.nfts[0].image if result.nfts else None

    async def _decorate(self, summary: CollectionSummary) -> CollectionSummary:
        """Apply verification, source and display fallbacks from the registry."""
        known = self.registry.lookup(summary.address)
        pool = await self.registry.launch_pool(summary.address)

        name = summary.name
        symbol = summary.symbol
        image = summary.image
        description = summary.description
        max_supply = summary.max_supply

        if pool is not None:
            name = pool.name or name
            symbol = pool.symbol or symbol
            description = pool.description or description
            image = image or (self.resolver.rewrite(pool.image_uri) if pool.image_uri else None)
            max_supply = max_supply or pool.max_supply
        if known is not None:
            if name == UNKNOWN_COLLECTION_NAME:
                name = known.name
            if symbol == UNKNOWN_COLLECTION_SYMBOL and known.symbol:
                symbol = known.symbol
            description = description or known.description
            image = image or known.image

        verified = self.registry.is_statically_verified(summary.address) or (
            pool is not None and pool.status == LaunchStatus.ACTIVE
        )
        source = CollectionSource.LAUNCHPAD if pool is not None else CollectionSource.BLOCKCHAIN

        return summary.model_copy(
            update={
                "name": name,
                "symbol": symbol,
                "image": image,
                "description": description,
                "max_supply": max_supply,
                "verified": verified,
                "source": source,
            }
        )

    async def list_collections(
        self, verified_only: bool = False
    ) -> tuple[list[CollectionSummary], int]:
        """Launchpad collections plus statically verified ones.

        Args:
            verified_only: Only ACTIVE launch pools, and only verified entries

        Returns:
            (collections, total before the verified filter)
        """
        addresses: list[str] = []
        for pool in await self.registry.launchpad_collections(active_only=verified_only):
            if pool.contract_address not in addresses:
                addresses.append(pool.contract_address)
        for known in self.registry.known_collections():
            if known.verified and known.address not in addresses:
                addresses.append(known.address)

        collections = [await self.get_collection_summary(a) for a in addresses]
        total = len(collections)
        if verified_only:
            collections = [c for c in collections if c.verified]

        logger.info(
            "collections_listed",
            count=len(collections),
            total=total,
            verified_only=verified_only,
        )
        return collections, total

    async def collection_preview(self, address: str, count: int) -> ScanResult:
        """Most recent tokens of a collection that have an image."""
        summary = await self.get_collection_summary(address)
        options = self.scan_options(
            limit=count,
            window=ScanWindow.RECENT,
            probe_cap=min(self.settings.scan_probe_cap, MAX_PREVIEW_COUNT),
            newest_first=True,
            require_image=True,
        )
        return await self.scanner.scan(address, options, summary=summary)

    async def collection_nfts(self, address: str, limit: int) -> ScanResult:
        """Full scan of a collection with verification and listing state."""
        summary = await self.get_collection_summary(address)
        result = await self.scanner.scan(address, self.scan_options(limit=limit), summary=summary)
        if self.listings is not None and result.nfts:
            result.nfts = await self.listings.annotate(result.nfts)
        return result

    async def collection_stats(self, address: str) -> CollectionStats:
        """Summary plus unique holders over the first sampled token IDs."""
        summary = await self.get_collection_summary(address)

        holders: set[str] = set()
        sampled = 0
        if summary.introspectable:
            ids = range(min(summary.total_supply or HOLDER_SAMPLE_SIZE, HOLDER_SAMPLE_SIZE))
            result = await self.scanner.scan_ids(
                summary,
                ids,
                self.scan_options(limit=HOLDER_SAMPLE_SIZE, resolve_metadata=False),
            )
            holders = {record.owner for record in result.nfts}
            sampled = len(result.scanned_ids)

        return CollectionStats(
            address=summary.address,
            name=summary.name,
            symbol=summary.symbol,
            total_supply=summary.total_supply,
            verified=summary.verified,
            nft_count=summary.total_supply,
            unique_holders=len(holders),
            sampled_ids=sampled,
        )

    async def scan_known_collections(
        self, per_collection: int = KNOWN_COLLECTION_SCAN_LIMIT
    ) -> list[NFTRecord]:
        """Scan every statically known collection.

        A collection whose scan fails is logged and skipped.
        """
        records: list[NFTRecord] = []
        for known in self.registry.known_collections():
            try:
                result = await self.collection_nfts(known.address, per_collection)
            except SquidMarketError as e:
                logger.warning(
                    "known_collection_scan_failed",
                    collection=known.address,
                    error=str(e),
                )
                continue
            records.extend(result.nfts)

        return sort_records(
            records, verified_first=True, newest_first=self.settings.scan_newest_first
        )

    async def user_nfts(self, owner: str) -> list[NFTRecord]:
        """Known-collection NFTs currently owned by ``owner``."""
        owner = owner.lower()
        return [r for r in await self.scan_known_collections() if r.owner == owner]

    async def marketplace_nfts(self, offset: int = 0, limit: int = 50) -> MarketplacePage:
        """Paginated marketplace-wide view over the known collections."""
        records = await self.scan_known_collections()
        return MarketplacePage(
            items=records[offset : offset + limit],
            total=len(records),
            offset=offset,
            limit=limit,
        )

    async def listing_details(self, listing_id: int) -> ListingDetails | None:
        """A marketplace listing hydrated with its token's metadata.

        Returns:
            ListingDetails, or None if the listing does not exist.

        Raises:
            ConfigurationError: If no marketplace is configured.
        """
        if self.listings is None:
            raise ConfigurationError("Marketplace address is not configured")

        listing = await self.listings.get_listing(listing_id)
        if listing is None:
            return None

        summary = await self.get_collection_summary(listing.collection)
        try:
            token_uri = await self.reader.token_uri(listing.collection, listing.token_id)
        except SquidMarketError as e:
            logger.debug(
                "listing_token_uri_unavailable",
                listing_id=listing_id,
                error=str(e),
            )
            token_uri = ""
        metadata = await self.resolver.resolve(token_uri)

        return ListingDetails(
            listing=listing,
            collection_name=summary.name,
            name=(metadata.name if metadata else None) or f"{summary.name} #{listing.token_id}",
            description=(metadata.description if metadata else None) or "",
            image=(metadata.image if metadata else None) or PLACEHOLDER_IMAGE,
            attributes=metadata.attributes if metadata else [],
            is_verified=summary.verified,
        )


async def create_discovery_service(settings: Settings | None = None) -> DiscoveryService:
    """Wire a DiscoveryService over the shared Supabase, RPC and HTTP clients."""
    settings = settings or get_settings()
    supabase = await get_supabase_client()
    reader = ContractReader(await get_rpc_client())

    return DiscoveryService(
        reader=reader,
        cache=CollectionCache(
            CollectionCacheRepository(supabase),
            ttl_seconds=settings.collection_cache_ttl_seconds,
        ),
        registry=CollectionRegistry(launch_pools=LaunchPoolRepository(supabase)),
        resolver=await get_metadata_resolver(),
        listings=ListingLookup(reader, settings.marketplace_address),
        settings=settings,
    )
