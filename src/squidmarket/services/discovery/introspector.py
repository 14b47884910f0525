"""Collection introspection with ordered accessor strategies.

Launchpad collections expose a rich ``getCollectionInfo()`` accessor;
any other ERC-721 only answers ``name()``, ``symbol()`` and maybe
``totalSupply()``. Strategies are tried in order and each fills only
the fields still missing, so a partial answer from one strategy is
completed by the next and every remaining gap gets its own default.
"""

import asyncio
from dataclasses import dataclass, fields
from typing import Protocol

import structlog

from squidmarket.constants.discovery import (
    UNKNOWN_COLLECTION_NAME,
    UNKNOWN_COLLECTION_SYMBOL,
)
from squidmarket.core.exceptions import SquidMarketError
from squidmarket.data.models.collection import CollectionSummary
from squidmarket.services.evm.contracts import ContractReader

logger = structlog.get_logger(__name__)


@dataclass
class CollectionReading:
    """Fields a strategy managed to read; None means unanswered."""

    name: str | None = None
    symbol: str | None = None
    total_supply: int | None = None
    max_supply: int | None = None
    description: str | None = None
    image: str | None = None

    def merge(self, other: "CollectionReading") -> None:
        """Fill fields still missing here from ``other``."""
        for f in fields(self):
            if getattr(self, f.name) is None:
                setattr(self, f.name, getattr(other, f.name))

    @property
    def is_complete(self) -> bool:
        return None not in (self.name, self.symbol, self.total_supply)

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


class IntrospectionStrategy(Protocol):
    """One way of reading a collection's display fields."""

    name: str

    async def read(self, reader: ContractReader, address: str) -> CollectionReading: ...


class RichAccessorStrategy:
    """Single ``getCollectionInfo()`` call of launchpad collections.

    Raises whatever the read raises; the introspector falls through.
    """

    name = "rich_accessor"

    async def read(self, reader: ContractReader, address: str) -> CollectionReading:
        info = await reader.collection_info(address)
        return CollectionReading(
            name=info.name or None,
            symbol=info.symbol or None,
            total_supply=info.current_supply,
            max_supply=info.max_supply or None,
            description=info.description or None,
            image=info.image or None,
        )


class ERC721AccessorStrategy:
    """Independent ``name()``, ``symbol()`` and ``totalSupply()`` reads.

    Each accessor that fails leaves its field unanswered without
    affecting the others.
    """

    name = "erc721_accessors"

    async def read(self, reader: ContractReader, address: str) -> CollectionReading:
        results = await asyncio.gather(
            reader.name(address),
            reader.symbol(address),
            reader.total_supply(address),
            return_exceptions=True,
        )

        answered: list[object] = []
        for accessor, result in zip(("name", "symbol", "totalSupply"), results, strict=True):
            if isinstance(result, SquidMarketError):
                logger.debug(
                    "collection_accessor_failed",
                    address=address,
                    accessor=accessor,
                    error=str(result),
                )
                answered.append(None)
            elif isinstance(result, BaseException):
                raise result
            else:
                answered.append(result)

        name, symbol, total_supply = answered
        return CollectionReading(
            name=name or None,  # type: ignore[arg-type]
            symbol=symbol or None,  # type: ignore[arg-type]
            total_supply=total_supply,  # type: ignore[arg-type]
        )


DEFAULT_STRATEGIES: tuple[IntrospectionStrategy, ...] = (
    RichAccessorStrategy(),
    ERC721AccessorStrategy(),
)


class CollectionIntrospector:
    """Builds a CollectionSummary from on-chain accessors.

    Never raises for contract-side or RPC failures: unanswered fields
    get defaults, and a summary with no answered field at all is
    flagged ``introspectable=False``.
    """

    def __init__(
        self,
        reader: ContractReader,
        strategies: tuple[IntrospectionStrategy, ...] | None = None,
    ) -> None:
        self.reader = reader
        self.strategies = strategies if strategies is not None else DEFAULT_STRATEGIES

    async def introspect(self, address: str) -> CollectionSummary:
        """Read name, symbol and supply of ``address``."""
        address = address.lower()
        reading = CollectionReading()

        for strategy in self.strategies:
            try:
                reading.merge(await strategy.read(self.reader, address))
            except SquidMarketError as e:
                logger.debug(
                    "introspection_strategy_failed",
                    address=address,
                    strategy=strategy.name,
                    error=str(e),
                )
                continue
            if reading.is_complete:
                break

        if reading.is_empty:
            logger.warning("collection_not_introspectable", address=address)

        return CollectionSummary(
            address=address,
            name=reading.name or UNKNOWN_COLLECTION_NAME,
            symbol=reading.symbol or UNKNOWN_COLLECTION_SYMBOL,
            total_supply=reading.total_supply or 0,
            max_supply=reading.max_supply,
            description=reading.description,
            image=reading.image,
            introspectable=not reading.is_empty,
        )
