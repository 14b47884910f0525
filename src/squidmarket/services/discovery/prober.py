"""Ownership probe for a single token ID."""

from dataclasses import dataclass
from enum import Enum

import structlog

from squidmarket.core.exceptions import ContractRevertError, SquidMarketError
from squidmarket.services.evm.contracts import ContractReader

logger = structlog.get_logger(__name__)


class ProbeOutcome(Enum):
    """Result class of an ownership probe."""

    EXISTS = "exists"
    ABSENT = "absent"  # Reverted or zero owner: burned or never minted
    FAILED = "failed"  # RPC or transport failure, retry advised


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of probing one token ID."""

    token_id: int
    outcome: ProbeOutcome
    owner: str | None = None
    error: str | None = None

    @property
    def exists(self) -> bool:
        return self.outcome is ProbeOutcome.EXISTS


class TokenProber:
    """Answers "who owns token N" with a single ``ownerOf`` read.

    No retries: a failed read is reported as FAILED and the caller
    decides whether to skip or retry later.
    """

    def __init__(self, reader: ContractReader) -> None:
        self.reader = reader

    async def probe(self, collection: str, token_id: int) -> ProbeResult:
        """Probe ownership of ``token_id`` in ``collection``."""
        try:
            owner = await self.reader.owner_of(collection, token_id)
        except ContractRevertError as e:
            return ProbeResult(token_id=token_id, outcome=ProbeOutcome.ABSENT, error=str(e))
        except SquidMarketError as e:
            logger.debug(
                "token_probe_failed",
                collection=collection,
                token_id=token_id,
                error=str(e),
            )
            return ProbeResult(token_id=token_id, outcome=ProbeOutcome.FAILED, error=str(e))

        return ProbeResult(token_id=token_id, outcome=ProbeOutcome.EXISTS, owner=owner)
