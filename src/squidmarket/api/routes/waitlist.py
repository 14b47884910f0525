"""Waitlist routes."""

from typing import Any

from fastapi import APIRouter, status

from squidmarket.api.dependencies import WaitlistRepoDep
from squidmarket.data.models.waitlist import WaitlistSignup

router = APIRouter(prefix="/waitlist", tags=["waitlist"])


@router.get("")
async def waitlist_count(repo: WaitlistRepoDep) -> dict[str, Any]:
    """Number of signups."""
    return {"success": True, "count": await repo.count()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def join_waitlist(signup: WaitlistSignup, repo: WaitlistRepoDep) -> dict[str, Any]:
    """Add an email to the waitlist (409 if already present)."""
    entry = await repo.add(signup)
    return {
        "success": True,
        "message": "Successfully added to waitlist!",
        "id": entry.id,
    }
