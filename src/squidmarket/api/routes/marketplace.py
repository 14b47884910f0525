"""Marketplace routes.

List and buy only return unsigned contract calls for the client
wallet; nothing here signs a transaction or holds funds.
"""

from typing import Any

from fastapi import APIRouter, HTTPException, status

from squidmarket.api.dependencies import DiscoveryServiceDep, TransactionBuilderDep
from squidmarket.api.responses import dump, dump_all
from squidmarket.data.models.listing import BuyRequest, ListRequest

router = APIRouter(prefix="/marketplace", tags=["marketplace"])


@router.post("/list")
async def list_nft(request: ListRequest, builder: TransactionBuilderDep) -> dict[str, Any]:
    """Approve and listItem calls for listing an NFT."""
    approve, list_item = builder.build_list(request)
    return {
        "success": True,
        "message": "List transaction should be handled on frontend with connected wallet",
        "contractAddress": list_item.contract_address,
        "functionName": list_item.function_name,
        "args": list_item.args,
        "data": list_item.data,
        "steps": dump_all([approve, list_item]),
    }


@router.post("/buy")
async def buy_nft(request: BuyRequest, builder: TransactionBuilderDep) -> dict[str, Any]:
    """buyItem call paying the listing price."""
    call = builder.build_buy(request)
    return {
        "success": True,
        "message": "Buy transaction should be handled on frontend with connected wallet",
        **dump(call),
    }


@router.get("/listing/{listing_id}")
async def get_listing(listing_id: int, service: DiscoveryServiceDep) -> dict[str, Any]:
    """A listing with its token's metadata."""
    details = await service.listing_details(listing_id)
    if details is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    return {"success": True, "listing": dump(details)}
