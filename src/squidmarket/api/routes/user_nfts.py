"""Persisted NFTs of a wallet."""

from typing import Any

from fastapi import APIRouter

from squidmarket.api.dependencies import NFTRepoDep, require_address
from squidmarket.api.responses import dump_all

router = APIRouter(tags=["nfts"])


@router.get("/user-nfts/{address}")
async def user_nfts(address: str, repo: NFTRepoDep) -> dict[str, Any]:
    """NFTs recorded as owned by ``address`` in the database."""
    owner = require_address(address, "owner")
    nfts = await repo.get_by_owner(owner)
    return {"success": True, "nfts": dump_all(nfts), "count": len(nfts)}
