"""Collection routes: list, preview and stats."""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from squidmarket.api.dependencies import DiscoveryServiceDep, require_address
from squidmarket.api.responses import dump, dump_all
from squidmarket.constants.discovery import DEFAULT_PREVIEW_COUNT, MAX_PREVIEW_COUNT

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get("")
async def list_collections(
    service: DiscoveryServiceDep,
    verified: Annotated[bool, Query()] = False,
) -> dict[str, Any]:
    """
    List launchpad and verified collections.

    With ``verified=true`` only ACTIVE launch pools and verified
    collections are returned; ``total`` counts before that filter.
    """
    collections, total = await service.list_collections(verified_only=verified)
    return {
        "success": True,
        "data": dump_all(collections),
        "count": len(collections),
        "total": total,
    }


@router.get("/{address}/preview")
async def collection_preview(
    address: str,
    service: DiscoveryServiceDep,
    count: Annotated[int, Query(ge=1, le=MAX_PREVIEW_COUNT)] = DEFAULT_PREVIEW_COUNT,
) -> dict[str, Any]:
    """Most recent tokens of a collection that have an image."""
    address = require_address(address, "collection")
    result = await service.collection_preview(address, count)

    data = [
        {"tokenId": str(nft.token_id), "image": nft.image, "name": nft.name}
        for nft in result.nfts
    ]
    envelope: dict[str, Any] = {
        "success": result.success,
        "data": data,
        "count": len(data),
        "collection": address,
    }
    if not result.success:
        envelope["error"] = result.message
    return envelope


@router.get("/{address}/stats")
async def collection_stats(address: str, service: DiscoveryServiceDep) -> dict[str, Any]:
    """Collection summary plus unique holder count."""
    address = require_address(address, "collection")
    stats = await service.collection_stats(address)
    return {"success": True, "data": dump(stats)}
