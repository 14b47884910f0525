"""Marketplace listing lookup for scan results."""

from collections import defaultdict

import structlog

from squidmarket.constants.discovery import ZERO_ADDRESS
from squidmarket.core.exceptions import (
    ConfigurationError,
    ContractRevertError,
    SquidMarketError,
)
from squidmarket.data.models.listing import Listing
from squidmarket.data.models.nft import NFTRecord
from squidmarket.services.evm.contracts import ContractReader

logger = structlog.get_logger(__name__)

# Page size of getActiveListings
LISTING_PAGE_SIZE = 100


class ListingLookup:
    """Reads active marketplace listings and annotates NFT records.

    Listing state never comes from the token scan itself; without a
    configured marketplace, or when the lookup fails, records stay
    unlisted.
    """

    def __init__(self, reader: ContractReader, marketplace_address: str | None) -> None:
        self.reader = reader
        self.marketplace_address = marketplace_address.lower() if marketplace_address else None

    async def active_listings(self, collection: str) -> dict[int, Listing]:
        """Active listings of ``collection`` keyed by token ID."""
        if self.marketplace_address is None:
            return {}

        collection = collection.lower()
        try:
            listings = await self.reader.get_active_listings(
                self.marketplace_address, collection, 0, LISTING_PAGE_SIZE
            )
        except SquidMarketError as e:
            logger.warning("listing_lookup_failed", collection=collection, error=str(e))
            return {}

        return {
            listing.token_id: listing for listing in listings if listing.collection == collection
        }

    async def annotate(self, records: list[NFTRecord]) -> list[NFTRecord]:
        """Copies of ``records`` with listing state filled in, same order."""
        by_collection: dict[str, list[NFTRecord]] = defaultdict(list)
        for record in records:
            by_collection[record.collection_address].append(record)

        listed: dict[tuple[str, int], Listing] = {}
        for collection in by_collection:
            for token_id, listing in (await self.active_listings(collection)).items():
                listed[(collection, token_id)] = listing

        annotated = []
        for record in records:
            listing = listed.get((record.collection_address, record.token_id))
            if listing is None:
                annotated.append(record)
                continue
            annotated.append(
                record.model_copy(
                    update={
                        "is_listed": True,
                        "listing_price": listing.price,
                        "listing_id": listing.listing_id,
                    }
                )
            )
        return annotated

    async def get_listing(self, listing_id: int) -> Listing | None:
        """Read a single listing.

        Returns:
            Listing, or None if the marketplace has no such listing.

        Raises:
            ConfigurationError: If no marketplace address is configured.
        """
        if self.marketplace_address is None:
            raise ConfigurationError("Marketplace address is not configured")

        try:
            listing = await self.reader.get_listing(self.marketplace_address, listing_id)
        except ContractRevertError:
            return None

        if listing.seller == ZERO_ADDRESS:
            return None
        return listing
