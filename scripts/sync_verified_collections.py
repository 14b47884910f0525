#!/usr/bin/env python3
"""
Scan the verified collections and persist their NFTs.

Each statically known collection is introspected (refreshing its cache
entry), scanned and upserted into the ``nfts`` table so the owner view
can be served without chain reads.

Usage:
    uv run python scripts/sync_verified_collections.py
    uv run python scripts/sync_verified_collections.py --per-collection 50
"""

import argparse
import asyncio
import sys

import structlog
from dotenv import load_dotenv

load_dotenv()

from squidmarket.config.logging import configure_logging  # noqa: E402
from squidmarket.constants.discovery import (  # noqa: E402
    KNOWN_COLLECTION_SCAN_LIMIT,
    MAX_COLLECTION_LIMIT,
)
from squidmarket.data.supabase.client import (  # noqa: E402
    close_supabase_client,
    get_supabase_client,
)
from squidmarket.data.supabase.repositories.nft_repo import NFTRepository  # noqa: E402
from squidmarket.services.discovery import (  # noqa: E402
    close_metadata_resolver,
    create_discovery_service,
)
from squidmarket.services.evm import close_rpc_client  # noqa: E402

log = structlog.get_logger()


async def sync(args: argparse.Namespace) -> int:
    """Scan every known collection and upsert the records."""
    service = await create_discovery_service()
    repo = NFTRepository(await get_supabase_client())

    print("\n" + "=" * 60)
    print("[SYNC] Syncing verified collections")
    print("=" * 60 + "\n")

    total = 0
    for known in service.registry.known_collections():
        summary = await service.get_collection_summary(known.address)
        print(f"{summary.name} ({summary.symbol})")
        print(f"    Address: {summary.address}")
        print(f"    Supply: {summary.total_supply}")

        result = await service.collection_nfts(known.address, args.per_collection)
        if not result.success:
            print(f"    [SKIP] {result.message}")
            continue

        written = await repo.upsert_many(result.nfts) if not args.dry_run else 0
        total += written
        print(f"    Found: {len(result.nfts)}  Failed IDs: {len(result.failed_ids)}")
        print(f"    Written: {written}\n")

    print(f"[OK] Synced {total} NFT(s)")
    log.info("verified_collections_synced", total=total, dry_run=args.dry_run)
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description="Sync verified collections")
    parser.add_argument(
        "--per-collection",
        type=int,
        default=KNOWN_COLLECTION_SCAN_LIMIT,
        help=f"Max NFTs scanned per collection (1-{MAX_COLLECTION_LIMIT})",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Scan without writing to the database",
    )
    args = parser.parse_args()

    if not 1 <= args.per_collection <= MAX_COLLECTION_LIMIT:
        parser.error(f"--per-collection must be between 1 and {MAX_COLLECTION_LIMIT}")

    configure_logging()
    try:
        return await sync(args)
    finally:
        await close_metadata_resolver()
        await close_rpc_client()
        await close_supabase_client()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
