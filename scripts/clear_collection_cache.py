#!/usr/bin/env python3
"""
Clear the persistent collection summary cache.

Every cached summary is dropped; the next request for a collection
re-reads it from chain.

Usage:
    uv run python scripts/clear_collection_cache.py
"""

import asyncio
import sys

import structlog
from dotenv import load_dotenv

load_dotenv()

from squidmarket.config.logging import configure_logging  # noqa: E402
from squidmarket.data.supabase.client import (  # noqa: E402
    close_supabase_client,
    get_supabase_client,
)
from squidmarket.data.supabase.repositories.collection_cache_repo import (  # noqa: E402
    CollectionCacheRepository,
)
from squidmarket.services.discovery.cache import CollectionCache  # noqa: E402

log = structlog.get_logger()


async def main() -> int:
    configure_logging()

    print("\n" + "=" * 60)
    print("[CACHE] Clearing collection cache")
    print("=" * 60 + "\n")

    client = await get_supabase_client()
    try:
        removed = await CollectionCache(CollectionCacheRepository(client)).clear()
    finally:
        await close_supabase_client()

    print(f"[OK] Removed {removed} cached collection(s)")
    log.info("cache_clear_complete", removed=removed)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
