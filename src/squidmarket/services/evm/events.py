"""Decoding of launchpad event logs."""

from dataclasses import dataclass
from typing import Any

from squidmarket.services.evm import abi

LAUNCH_CREATED_TOPIC = abi.event_topic(abi.LAUNCH_CREATED_EVENT)


@dataclass(frozen=True)
class LaunchCreated:
    """``LaunchCreated(uint256 indexed launchId, address indexed collection, address indexed creator)``."""

    launch_id: int
    collection: str
    creator: str
    block_number: int | None = None


def _topic_address(topic: str) -> str:
    return "0x" + topic.removeprefix("0x")[-40:].lower()


def decode_launch_created(log: dict[str, Any]) -> LaunchCreated:
    """Decode a raw ``eth_getLogs`` entry.

    Raises:
        ValueError: If the log is not a LaunchCreated event.
    """
    topics = log.get("topics") or []
    if len(topics) != 4 or str(topics[0]).lower() != LAUNCH_CREATED_TOPIC:
        raise ValueError("Not a LaunchCreated log")

    block = log.get("blockNumber")
    return LaunchCreated(
        launch_id=int(topics[1], 16),
        collection=_topic_address(topics[2]),
        creator=_topic_address(topics[3]),
        block_number=int(block, 16) if isinstance(block, str) else block,
    )
