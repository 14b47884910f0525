"""Collection-related Pydantic models.

CollectionSummary is what the discovery pipeline produces and the HTTP
layer returns. CacheEntry is its persisted, timestamped form in the
``collection_cache`` table.
"""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import Field, field_validator

from squidmarket.constants.discovery import (
    UNKNOWN_COLLECTION_NAME,
    UNKNOWN_COLLECTION_SYMBOL,
)
from squidmarket.data.models.base import CamelModel, normalize_address


class CollectionSource(str, Enum):
    """Where a collection entered the marketplace from."""

    LAUNCHPAD = "launchpad"
    BLOCKCHAIN = "blockchain"


class CollectionSummary(CamelModel):
    """Display summary of an ERC-721 collection.

    Attributes:
        address: Lowercased contract address (canonical key).
        name: Display name, ``Unknown Collection`` when unreadable.
        symbol: Ticker symbol, ``UNKNOWN`` when unreadable.
        total_supply: Live on-chain supply (0 when unknown).
        max_supply: Maximum supply from the rich accessor, if any.
        image: Preview image URL (gateway-rewritten).
        description: Optional description.
        verified: Verification flag, as decided by the caller.
        source: ``launchpad`` or ``blockchain``.
        introspectable: False when the address answered no accessor at all.
        updated_at: When the summary was read from chain.
    """

    address: str
    name: str = UNKNOWN_COLLECTION_NAME
    symbol: str = UNKNOWN_COLLECTION_SYMBOL
    total_supply: int = Field(default=0, ge=0)
    max_supply: int | None = Field(default=None, ge=0)
    image: str | None = None
    description: str | None = None
    verified: bool = False
    source: CollectionSource = CollectionSource.BLOCKCHAIN
    introspectable: bool = True
    updated_at: datetime | None = None

    @field_validator("address")
    @classmethod
    def _lowercase_address(cls, v: str) -> str:
        return normalize_address(v)


class CacheEntry(CamelModel):
    """Row of the ``collection_cache`` table.

    Table schema expected:
        collection_cache (
            address TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            symbol TEXT NOT NULL,
            total_supply INTEGER NOT NULL DEFAULT 0,
            max_supply INTEGER,
            image TEXT,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL
        )
    """

    address: str
    name: str = UNKNOWN_COLLECTION_NAME
    symbol: str = UNKNOWN_COLLECTION_SYMBOL
    total_supply: int = Field(default=0, ge=0)
    max_supply: int | None = None
    image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime

    @field_validator("address")
    @classmethod
    def _lowercase_address(cls, v: str) -> str:
        return normalize_address(v)

    def is_fresh(self, now: datetime, ttl_seconds: int) -> bool:
        """Fresh iff ``now - updated_at < ttl``."""
        return now - self.updated_at < timedelta(seconds=ttl_seconds)

    def to_summary(self) -> CollectionSummary:
        """Rebuild the summary this entry materializes."""
        return CollectionSummary(
            address=self.address,
            name=self.name,
            symbol=self.symbol,
            total_supply=self.total_supply,
            max_supply=self.max_supply,
            image=self.image,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_summary(cls, summary: CollectionSummary, updated_at: datetime) -> "CacheEntry":
        """Stamp a summary with ``updated_at`` for storage."""
        return cls(
            address=summary.address,
            name=summary.name,
            symbol=summary.symbol,
            total_supply=summary.total_supply,
            max_supply=summary.max_supply,
            image=summary.image,
            updated_at=updated_at,
        )


class KnownCollection(CamelModel):
    """Entry of the static known-collection list."""

    address: str
    name: str
    symbol: str | None = None
    type: str = "ERC721"
    verified: bool = True
    description: str | None = None
    image: str | None = None

    @field_validator("address")
    @classmethod
    def _lowercase_address(cls, v: str) -> str:
        return normalize_address(v)


class CollectionStats(CamelModel):
    """Collection summary plus holder statistics over a sample of IDs."""

    address: str
    name: str
    symbol: str
    total_supply: int = 0
    verified: bool = False
    type: str = "ERC721"
    nft_count: int = 0
    unique_holders: int = 0
    sampled_ids: int = 0
