"""Multi-action NFT scanner route."""

from enum import Enum
from typing import Annotated, Any

from fastapi import APIRouter, Query

from squidmarket.api.dependencies import DiscoveryServiceDep, require_address
from squidmarket.api.responses import dump, dump_all
from squidmarket.constants.discovery import DEFAULT_COLLECTION_LIMIT, MAX_COLLECTION_LIMIT
from squidmarket.core.exceptions import ValidationError

router = APIRouter(tags=["nft-scanner"])


class ScannerAction(str, Enum):
    """Actions of the scanner route."""

    SCAN_COLLECTION = "scan-collection"
    COLLECTION_STATS = "collection-stats"
    USER_NFTS = "user-nfts"
    MARKETPLACE_NFTS = "marketplace-nfts"
    KNOWN_COLLECTIONS = "known-collections"
    SCAN_ALL = "scan-all"


INVALID_ACTION_MESSAGE = "Invalid action. Available actions: " + ", ".join(
    a.value for a in ScannerAction
)


@router.get("/nft-scanner")
async def nft_scanner(
    service: DiscoveryServiceDep,
    action: Annotated[str | None, Query()] = None,
    collection: Annotated[str | None, Query()] = None,
    owner: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=MAX_COLLECTION_LIMIT)] = DEFAULT_COLLECTION_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> dict[str, Any]:
    """Dispatch one of the scanner actions."""
    try:
        selected = ScannerAction(action)
    except ValueError as e:
        raise ValidationError(INVALID_ACTION_MESSAGE) from e

    if selected is ScannerAction.SCAN_COLLECTION:
        address = require_address(collection, "collection")
        result = await service.collection_nfts(address, limit)
        envelope: dict[str, Any] = {
            "success": result.success,
            "data": dump_all(result.nfts),
            "count": len(result.nfts),
            "collection": address,
        }
        if not result.success:
            envelope["error"] = result.message
        return envelope

    if selected is ScannerAction.COLLECTION_STATS:
        address = require_address(collection, "collection")
        stats = await service.collection_stats(address)
        return {"success": True, "data": dump(stats)}

    if selected is ScannerAction.USER_NFTS:
        owner_address = require_address(owner, "owner")
        nfts = await service.user_nfts(owner_address)
        return {
            "success": True,
            "data": dump_all(nfts),
            "count": len(nfts),
            "owner": owner_address,
        }

    if selected is ScannerAction.MARKETPLACE_NFTS:
        page = await service.marketplace_nfts(offset=offset, limit=limit)
        return {
            "success": True,
            "data": dump_all(page.items),
            "total": page.total,
            "count": len(page.items),
            "offset": page.offset,
            "limit": page.limit,
            "hasMore": page.has_more,
        }

    if selected is ScannerAction.KNOWN_COLLECTIONS:
        known = service.registry.known_collections()
        return {"success": True, "data": dump_all(known), "count": len(known)}

    nfts = await service.scan_known_collections()
    return {
        "success": True,
        "data": dump_all(nfts),
        "count": len(nfts),
        "collections": len(service.registry.known_collections()),
    }
