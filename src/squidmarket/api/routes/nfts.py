"""NFT routes for a single collection."""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from squidmarket.api.dependencies import DiscoveryServiceDep, require_address
from squidmarket.api.responses import dump, dump_all
from squidmarket.constants.discovery import DEFAULT_COLLECTION_LIMIT, MAX_COLLECTION_LIMIT

router = APIRouter(prefix="/nfts", tags=["nfts"])


@router.get("/collection/{address}")
async def collection_nfts(
    address: str,
    service: DiscoveryServiceDep,
    limit: Annotated[int, Query(ge=1, le=MAX_COLLECTION_LIMIT)] = DEFAULT_COLLECTION_LIMIT,
) -> dict[str, Any]:
    """
    Scan a collection's tokens.

    A collection that answers no ERC-721 accessor yields
    ``success: false`` with an empty list; an empty but healthy
    collection yields ``success: true`` with an empty list.
    """
    address = require_address(address, "collection")
    result = await service.collection_nfts(address, limit)

    envelope: dict[str, Any] = {
        "success": result.success,
        "collection": dump(result.collection),
        "nfts": dump_all(result.nfts),
        "count": len(result.nfts),
    }
    if not result.success:
        envelope["error"] = result.message
    return envelope
