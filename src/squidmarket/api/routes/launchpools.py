"""Launch pool routes."""

from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Query, status

from squidmarket.api.dependencies import LaunchPoolRepoDep
from squidmarket.api.responses import dump, dump_all
from squidmarket.data.models.launch_pool import (
    LaunchPoolCreate,
    LaunchPoolUpdate,
    LaunchStatus,
)

router = APIRouter(prefix="/launchpools", tags=["launchpools"])


@router.get("")
async def list_launch_pools(
    repo: LaunchPoolRepoDep,
    status_filter: Annotated[LaunchStatus | None, Query(alias="status")] = None,
) -> dict[str, Any]:
    """Launch pools, newest first."""
    pools = await repo.list_all(status=status_filter)
    return {"success": True, "data": dump_all(pools), "count": len(pools)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_launch_pool(pool: LaunchPoolCreate, repo: LaunchPoolRepoDep) -> dict[str, Any]:
    """Register a launch pool."""
    created = await repo.create(pool)
    return {"success": True, "data": dump(created)}


@router.put("")
async def update_launch_pool(update: LaunchPoolUpdate, repo: LaunchPoolRepoDep) -> dict[str, Any]:
    """Update a launch pool's status fields."""
    updated = await repo.update(update)
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Launch pool not found"
        )
    return {"success": True, "data": dump(updated)}
