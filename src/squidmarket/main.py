"""SquidMarket - Main application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from squidmarket.api.errors import register_exception_handlers
from squidmarket.api.routes import (
    collections,
    health,
    launchpools,
    marketplace,
    nft_scanner,
    nfts,
    user_nfts,
    waitlist,
)
from squidmarket.config import get_settings
from squidmarket.config.logging import configure_logging
from squidmarket.core.exceptions import DatabaseConnectionError
from squidmarket.data.supabase.client import close_supabase_client, get_supabase_client
from squidmarket.services.discovery.metadata import close_metadata_resolver
from squidmarket.services.evm.rpc_client import close_rpc_client, get_rpc_client

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle.

    On startup: configure logging, connect to Supabase (gracefully
    handle failures) and create the RPC client.
    On shutdown: close all clients.
    """
    configure_logging()
    log.info("application_starting")

    try:
        await get_supabase_client()
        log.info("startup_supabase_connected")
    except DatabaseConnectionError as e:
        log.warning("startup_supabase_failed", error=str(e))

    await get_rpc_client()

    yield

    await close_metadata_resolver()
    await close_rpc_client()
    await close_supabase_client()
    log.info("shutdown_complete")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        description="NFT marketplace collection discovery and caching",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["*"],
    )
    register_exception_handlers(application)

    application.include_router(health.router)
    application.include_router(collections.router, prefix="/api")
    application.include_router(nfts.router, prefix="/api")
    application.include_router(nft_scanner.router, prefix="/api")
    application.include_router(user_nfts.router, prefix="/api")
    application.include_router(marketplace.router, prefix="/api")
    application.include_router(launchpools.router, prefix="/api")
    application.include_router(waitlist.router, prefix="/api")

    return application


def main() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "squidmarket.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
