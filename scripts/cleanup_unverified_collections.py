#!/usr/bin/env python3
"""
Remove launch pools and NFTs of collections that are not verified.

Only the statically verified collections survive.

Usage:
    uv run python scripts/cleanup_unverified_collections.py --dry-run
    uv run python scripts/cleanup_unverified_collections.py
"""

import argparse
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
from squidmarket.data.supabase.repositories import (  # noqa: E402
    LaunchPoolRepository,
    NFTRepository,
)
from squidmarket.services.discovery import CollectionRegistry  # noqa: E402

log = structlog.get_logger()


async def cleanup(args: argparse.Namespace) -> int:
    client = await get_supabase_client()
    pools = LaunchPoolRepository(client)
    nfts = NFTRepository(client)

    keep = [c.address for c in CollectionRegistry().known_collections() if c.verified]

    print("\n" + "=" * 60)
    print("[CLEANUP] Removing unverified collections")
    print("=" * 60 + "\n")
    print("Keeping:")
    for address in keep:
        print(f"    {address}")
    print()

    if args.dry_run:
        doomed = [p for p in await pools.list_all() if p.contract_address not in keep]
        print(f"[DRY RUN] Would delete {len(doomed)} launch pool(s):")
        for pool in doomed:
            print(f"    #{pool.launch_id} {pool.name} ({pool.contract_address})")
        return 0

    deleted_pools = await pools.delete_not_in(keep)
    deleted_nfts = await nfts.delete_by_collections_not_in(keep)

    print(f"[OK] Deleted {deleted_pools} launch pool(s) and {deleted_nfts} NFT(s)")
    log.info(
        "unverified_collections_removed",
        launch_pools=deleted_pools,
        nfts=deleted_nfts,
    )
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description="Remove unverified collections")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List what would be deleted without deleting",
    )
    args = parser.parse_args()

    configure_logging()
    try:
        return await cleanup(args)
    finally:
        await close_supabase_client()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
