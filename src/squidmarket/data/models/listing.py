"""Marketplace listing model, decoded from the marketplace contract."""

from datetime import datetime

from pydantic import Field, computed_field, field_validator
from web3 import Web3

from squidmarket.data.models.base import CamelModel, normalize_address
from squidmarket.data.models.nft import NFTAttribute


class Listing(CamelModel):
    """An NFT offered for sale on the marketplace contract."""

    listing_id: int
    collection: str
    token_id: int
    seller: str
    price_wei: int
    listing_type: int = 0
    status: int = 0
    created_at: datetime | None = None
    end_time: datetime | None = None
    highest_bidder: str | None = None
    highest_bid_wei: int | None = None

    @field_validator("collection", "seller")
    @classmethod
    def _lowercase_address(cls, v: str) -> str:
        return normalize_address(v)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def price(self) -> str:
        """Price in ether as a decimal string."""
        return str(Web3.from_wei(self.price_wei, "ether"))


class ListRequest(CamelModel):
    """Request to list an NFT on the marketplace."""

    collection: str = Field(min_length=1)
    token_id: int = Field(ge=0)
    price: str = Field(min_length=1, description="Price in ether, as a decimal string")
    listing_type: int = Field(default=0, ge=0, le=1)
    auction_duration: int = Field(default=0, ge=0, description="Seconds, auctions only")

    @field_validator("collection")
    @classmethod
    def _valid_collection(cls, v: str) -> str:
        if not Web3.is_address(v):
            raise ValueError(f"Invalid collection address: {v}")
        return normalize_address(v)


class BuyRequest(CamelModel):
    """Request to buy a listed NFT."""

    listing_id: int = Field(ge=0)
    price: str = Field(min_length=1, description="Price in ether, as a decimal string")


class UnsignedCall(CamelModel):
    """Contract call for the client wallet to sign and send.

    ``args`` holds uint256 values as decimal strings so they survive
    JSON number precision; ``data`` is the ready-to-send calldata.
    """

    step: int = 1
    description: str
    contract_address: str
    function_name: str
    args: list[str | int]
    data: str
    value: str | None = None


class ListingDetails(CamelModel):
    """Listing joined with its token's metadata, for the listing page."""

    listing: Listing
    collection_name: str
    name: str
    description: str = ""
    image: str
    attributes: list[NFTAttribute] = Field(default_factory=list)
    is_verified: bool = False
