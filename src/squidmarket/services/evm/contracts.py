"""Typed contract reads on top of the JSON-RPC client.

Every read either returns a decoded Python value or raises:
- ContractRevertError when the contract said no (revert, empty return
  data from a non-contract, zero-address owner);
- ContractCallError / ExternalServiceError when the node or network failed.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from eth_abi.exceptions import DecodingError

from squidmarket.constants.discovery import ZERO_ADDRESS
from squidmarket.core.exceptions import ContractRevertError
from squidmarket.data.models.listing import Listing
from squidmarket.services.evm import abi
from squidmarket.services.evm.rpc_client import EVMRPCClient


@dataclass(frozen=True)
class CollectionInfo:
    """Decoded ``getCollectionInfo()`` tuple of launchpad collections."""

    name: str
    symbol: str
    description: str
    image: str
    creator: str
    max_supply: int
    current_supply: int
    status: int
    created_at: int


def _timestamp(value: int) -> datetime | None:
    return datetime.fromtimestamp(value, UTC) if value > 0 else None


class ContractReader:
    """Read-only view of ERC-721 collections and the marketplace.

    Example:
        reader = ContractReader(await get_rpc_client())
        owner = await reader.owner_of("0xabc...", 1)
    """

    def __init__(self, rpc: EVMRPCClient) -> None:
        self.rpc = rpc

    async def call(self, address: str, signature: str, output_type: str, *args: Any) -> Any:
        """Call ``signature`` on ``address`` and decode one return value."""
        raw = await self.rpc.eth_call(address, abi.encode_call(signature, *args))
        if not raw:
            raise ContractRevertError(address, signature, "empty return data")
        try:
            return abi.decode_single(output_type, raw)
        except DecodingError as e:
            raise ContractRevertError(address, signature, f"undecodable return data: {e}") from e

    # ERC-721

    async def owner_of(self, address: str, token_id: int) -> str:
        owner = await self.call(address, abi.OWNER_OF, "address", token_id)
        owner = str(owner).lower()
        if owner == ZERO_ADDRESS:
            raise ContractRevertError(address, abi.OWNER_OF, "zero address owner")
        return owner

    async def token_uri(self, address: str, token_id: int) -> str:
        return str(await self.call(address, abi.TOKEN_URI, "string", token_id))

    async def name(self, address: str) -> str:
        return str(await self.call(address, abi.NAME, "string"))

    async def symbol(self, address: str) -> str:
        return str(await self.call(address, abi.SYMBOL, "string"))

    async def total_supply(self, address: str) -> int:
        return int(await self.call(address, abi.TOTAL_SUPPLY, "uint256"))

    async def collection_info(self, address: str) -> CollectionInfo:
        """Rich accessor exposed by launchpad-deployed collections."""
        values = await self.call(address, abi.GET_COLLECTION_INFO, abi.COLLECTION_INFO_TYPE)
        name, symbol, description, image, creator, max_supply, current, status, created = values
        return CollectionInfo(
            name=name,
            symbol=symbol,
            description=description,
            image=image,
            creator=str(creator).lower(),
            max_supply=int(max_supply),
            current_supply=int(current),
            status=int(status),
            created_at=int(created),
        )

    # Marketplace

    async def get_active_listings(
        self, marketplace: str, collection: str, offset: int = 0, limit: int = 100
    ) -> list[Listing]:
        """Active listings of ``collection`` on the marketplace contract."""
        rows = await self.call(
            marketplace,
            abi.GET_ACTIVE_LISTINGS,
            abi.ACTIVE_LISTING_TYPE,
            collection,
            offset,
            limit,
        )
        return [
            Listing(
                listing_id=listing_id,
                collection=row_collection,
                token_id=token_id,
                seller=seller,
                price_wei=price,
                listing_type=listing_type,
                status=status,
            )
            for listing_id, row_collection, token_id, seller, price, listing_type, status in rows
        ]

    async def get_listing(self, marketplace: str, listing_id: int) -> Listing:
        """Single listing by id."""
        (
            row_id,
            collection,
            token_id,
            seller,
            price,
            listing_type,
            status,
            created_at,
            end_time,
            highest_bidder,
            highest_bid,
        ) = await self.call(marketplace, abi.GET_LISTING, abi.LISTING_TYPE, listing_id)

        bidder = str(highest_bidder).lower()
        return Listing(
            listing_id=row_id,
            collection=collection,
            token_id=token_id,
            seller=seller,
            price_wei=price,
            listing_type=listing_type,
            status=status,
            created_at=_timestamp(created_at),
            end_time=_timestamp(end_time),
            highest_bidder=None if bidder == ZERO_ADDRESS else bidder,
            highest_bid_wei=highest_bid or None,
        )
