"""Health check endpoint with database and RPC status."""

from typing import Any

from fastapi import APIRouter

from squidmarket.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        dict with overall status, version, database health and RPC circuit state.
    """
    settings = get_settings()

    supabase_health = await _get_supabase_health()
    rpc_health = _get_rpc_health()

    all_healthy = supabase_health["healthy"] and rpc_health["healthy"]

    return {
        "status": "ok" if all_healthy else "degraded",
        "version": settings.app_version,
        "databases": {"supabase": supabase_health},
        "rpc": rpc_health,
    }


async def _get_supabase_health() -> dict[str, Any]:
    """Get Supabase health status."""
    # Read the current singleton, not the one bound at import
    import squidmarket.data.supabase.client as supabase_module  # noqa: PLC0415

    client = supabase_module._supabase_client
    if client is None:
        return {"status": "disconnected", "healthy": False}
    return await client.health_check()


def _get_rpc_health() -> dict[str, Any]:
    """Circuit breaker state of the RPC client, without sending a request."""
    import squidmarket.services.evm.rpc_client as rpc_module  # noqa: PLC0415

    client = rpc_module._rpc_client
    if client is None:
        return {"status": "idle", "healthy": True}

    state = client.circuit_breaker.state.value
    return {"status": state, "healthy": state != "open"}
