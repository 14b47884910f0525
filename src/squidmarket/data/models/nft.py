"""NFT record models."""

from pydantic import BaseModel, Field, field_validator

from squidmarket.data.models.base import CamelModel, normalize_address


class NFTAttribute(BaseModel):
    """One trait of a token's metadata, in its metadata-standard shape."""

    trait_type: str
    value: str | int | float | bool | None = None


class NFTRecord(CamelModel):
    """A token that answered an ownership probe, enriched with metadata.

    Identity is ``(collection_address, token_id)``.

    Table schema expected (when persisted):
        nfts (
            collection_address TEXT NOT NULL,
            token_id NUMERIC NOT NULL,
            owner TEXT NOT NULL,
            name TEXT, description TEXT, image TEXT,
            attributes JSONB, token_uri TEXT,
            collection_name TEXT, is_verified BOOLEAN,
            updated_at TIMESTAMPTZ DEFAULT NOW(),
            UNIQUE (collection_address, token_id)
        )
    """

    collection_address: str
    token_id: int = Field(ge=0)
    owner: str
    name: str
    description: str = ""
    image: str
    attributes: list[NFTAttribute] = Field(default_factory=list)
    token_uri: str = ""
    collection_name: str
    is_verified: bool = False
    is_listed: bool = False
    listing_price: str | None = None
    listing_id: int | None = None

    @field_validator("collection_address", "owner")
    @classmethod
    def _lowercase_address(cls, v: str) -> str:
        return normalize_address(v)
