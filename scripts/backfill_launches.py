#!/usr/bin/env python3
"""
Backfill launch pools from recent LaunchCreated events.

Reads the launchpad's LaunchCreated logs over the last N blocks and
registers every launch that has no launch pool row yet, in PENDING
status. Collection details come from the collection's
``getCollectionInfo``; when that read fails a minimal entry is created.

Usage:
    uv run python scripts/backfill_launches.py
    uv run python scripts/backfill_launches.py --blocks 5000
"""

import argparse
import asyncio
import sys

import structlog
from dotenv import load_dotenv

load_dotenv()

from squidmarket.config.logging import configure_logging  # noqa: E402
from squidmarket.config.settings import get_settings  # noqa: E402
from squidmarket.core.exceptions import SquidMarketError  # noqa: E402
from squidmarket.data.models.launch_pool import LaunchPoolCreate, LaunchStatus  # noqa: E402
from squidmarket.data.supabase.client import (  # noqa: E402
    close_supabase_client,
    get_supabase_client,
)
from squidmarket.data.supabase.repositories import LaunchPoolRepository  # noqa: E402
from squidmarket.services.evm import (  # noqa: E402
    ContractReader,
    LaunchCreated,
    close_rpc_client,
    decode_launch_created,
    get_rpc_client,
)
from squidmarket.services.evm.events import LAUNCH_CREATED_TOPIC  # noqa: E402

log = structlog.get_logger()


async def build_pool(
    reader: ContractReader, event: LaunchCreated, launchpad: str
) -> LaunchPoolCreate:
    """Launch pool payload for ``event``, minimal when the collection is unreadable."""
    try:
        info = await reader.collection_info(event.collection)
    except SquidMarketError as e:
        log.warning(
            "launch_collection_unreadable",
            launch_id=event.launch_id,
            collection=event.collection,
            error=str(e),
        )
        return LaunchPoolCreate(
            launch_id=event.launch_id,
            contract_address=event.collection,
            launchpad_address=launchpad,
            name=f"Launch #{event.launch_id}",
            symbol="NFT",
            description="NFT Collection",
            max_supply=0,
            creator=event.creator,
            status=LaunchStatus.PENDING,
        )

    return LaunchPoolCreate(
        launch_id=event.launch_id,
        contract_address=event.collection,
        launchpad_address=launchpad,
        name=info.name or f"Launch #{event.launch_id}",
        symbol=info.symbol or "NFT",
        description=info.description or "NFT Collection",
        image_uri=info.image or None,
        max_supply=info.max_supply,
        creator=event.creator,
        status=LaunchStatus.PENDING,
    )


async def backfill(args: argparse.Namespace) -> int:
    settings = get_settings()
    if settings.launchpad_address is None:
        print("[ERROR] LAUNCHPAD_ADDRESS is not configured")
        return 1

    rpc = await get_rpc_client()
    reader = ContractReader(rpc)
    pools = LaunchPoolRepository(await get_supabase_client())

    latest = await rpc.get_block_number()
    from_block = max(0, latest - args.blocks)

    print("\n" + "=" * 60)
    print("[BACKFILL] LaunchCreated events")
    print("=" * 60 + "\n")
    print(f"Launchpad: {settings.launchpad_address}")
    print(f"Blocks: {from_block} -> {latest}\n")

    logs = await rpc.get_logs(
        settings.launchpad_address, [LAUNCH_CREATED_TOPIC], from_block, latest
    )

    created = 0
    for raw in logs:
        try:
            event = decode_launch_created(raw)
        except ValueError:
            continue

        if await pools.get_by_launch_id(event.launch_id) is not None:
            print(f"    #{event.launch_id} already registered")
            continue

        pool = await pools.create(
            await build_pool(reader, event, settings.launchpad_address)
        )
        created += 1
        print(f"    #{pool.launch_id} {pool.name} ({pool.contract_address})")

    print(f"\n[OK] {len(logs)} event(s), {created} launch pool(s) created")
    log.info("launch_backfill_complete", events=len(logs), created=created)
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description="Backfill launch pools from chain events")
    parser.add_argument(
        "--blocks",
        type=int,
        default=1000,
        help="How many recent blocks to scan (default: 1000)",
    )
    args = parser.parse_args()
    if args.blocks < 1:
        parser.error("--blocks must be positive")

    configure_logging()
    try:
        return await backfill(args)
    finally:
        await close_rpc_client()
        await close_supabase_client()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
