"""Token-range scan of a single collection.

The orchestrator picks candidate token IDs, probes each for an owner,
reads ``tokenURI`` for the ones that exist and resolves their metadata
into NFTRecord objects. A missing or failing token is skipped; it never
aborts the scan.

Window policy (``ScanWindow``):
    ASCENDING  IDs ``0 .. min(supply, limit) - 1``
    RECENT     IDs ``supply - 1`` down to ``max(0, supply - limit)``
When supply is unknown or zero, IDs ``0 .. probe_cap - 1`` are probed
in order until ``limit`` records are collected.
"""

import asyncio
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from itertools import islice

import structlog

from squidmarket.config.settings import Settings
from squidmarket.constants.discovery import (
    DEFAULT_COLLECTION_LIMIT,
    PLACEHOLDER_IMAGE,
    SEQUENTIAL_PROBE_CAP,
)
from squidmarket.core.exceptions import SquidMarketError
from squidmarket.data.models.collection import CollectionSummary
from squidmarket.data.models.nft import NFTRecord
from squidmarket.services.discovery.introspector import CollectionIntrospector
from squidmarket.services.discovery.metadata import MetadataResolver
from squidmarket.services.discovery.prober import ProbeOutcome, ProbeResult, TokenProber
from squidmarket.services.evm.contracts import ContractReader

logger = structlog.get_logger(__name__)

NOT_INTROSPECTABLE_MESSAGE = "Collection not introspectable: no ERC-721 accessor answered"


class ScanWindow(str, Enum):
    """Which token IDs to scan when supply is known."""

    ASCENDING = "ascending"
    RECENT = "recent"


@dataclass(frozen=True)
class ScanOptions:
    """Parameters of one scan.

    Attributes:
        limit: Maximum number of records returned.
        window: Token ID window used when supply is known.
        probe_cap: IDs probed at most when supply is unknown.
        concurrency: Probes in flight at once (1 = sequential).
        verified_first: Sort verified records before unverified ones.
        newest_first: Sort by descending token ID.
        resolve_metadata: Fetch token URIs and metadata (off for owner-only scans).
        require_image: Only keep (and count) records whose metadata has an image.
    """

    limit: int = DEFAULT_COLLECTION_LIMIT
    window: ScanWindow = ScanWindow.ASCENDING
    probe_cap: int = SEQUENTIAL_PROBE_CAP
    concurrency: int = 1
    verified_first: bool = True
    newest_first: bool = False
    resolve_metadata: bool = True
    require_image: bool = False

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError(f"limit must be >= 1, got {self.limit}")
        if self.probe_cap < 1:
            raise ValueError(f"probe_cap must be >= 1, got {self.probe_cap}")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: object) -> "ScanOptions":
        """Options seeded from configuration, with per-call overrides."""
        values: dict[str, object] = {
            "window": ScanWindow(settings.scan_window),
            "probe_cap": settings.scan_probe_cap,
            "concurrency": settings.scan_concurrency,
            "newest_first": settings.scan_newest_first,
        }
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


@dataclass
class ScanResult:
    """Records found in one collection, plus what was probed."""

    collection: CollectionSummary
    nfts: list[NFTRecord] = field(default_factory=list)
    scanned_ids: list[int] = field(default_factory=list)
    failed_ids: list[int] = field(default_factory=list)
    message: str | None = None

    @property
    def success(self) -> bool:
        return self.collection.introspectable


def candidate_ids(total_supply: int, options: ScanOptions) -> range:
    """Token IDs to probe, in probe order."""
    if total_supply <= 0:
        return range(options.probe_cap)

    count = min(total_supply, options.limit)
    if options.window is ScanWindow.RECENT:
        return range(total_supply - 1, total_supply - 1 - count, -1)
    return range(count)


def sort_records(
    records: Iterable[NFTRecord],
    verified_first: bool = True,
    newest_first: bool = False,
) -> list[NFTRecord]:
    """Order records for display.

    Primary key is verification (when ``verified_first``), then token ID
    ascending, or descending with ``newest_first``. Collection address
    breaks remaining ties so the order is total.
    """

    def key(record: NFTRecord) -> tuple[bool, int, str]:
        unverified = not record.is_verified if verified_first else False
        token_key = -record.token_id if newest_first else record.token_id
        return (unverified, token_key, record.collection_address)

    return sorted(records, key=key)


def _batches(ids: Iterable[int], size: int) -> Iterator[list[int]]:
    iterator = iter(ids)
    while batch := list(islice(iterator, size)):
        yield batch


class ScanOrchestrator:
    """Drives probe, tokenURI read and metadata resolution per token.

    Example:
        scanner = ScanOrchestrator(reader, resolver)
        result = await scanner.scan("0xabc...", ScanOptions(limit=10))
    """

    def __init__(
        self,
        reader: ContractReader,
        resolver: MetadataResolver,
        introspector: CollectionIntrospector | None = None,
        prober: TokenProber | None = None,
    ) -> None:
        self.reader = reader
        self.resolver = resolver
        self.introspector = introspector or CollectionIntrospector(reader)
        self.prober = prober or TokenProber(reader)

    async def scan(
        self,
        address: str,
        options: ScanOptions | None = None,
        summary: CollectionSummary | None = None,
    ) -> ScanResult:
        """Scan a collection.

        Args:
            address: Collection contract address
            options: Scan parameters (defaults when omitted)
            summary: Already known summary; introspected when omitted

        Returns:
            ScanResult. A collection that answered no accessor yields an
            empty result with an explanatory message.
        """
        options = options or ScanOptions()
        address = address.lower()
        if summary is None:
            summary = await self.introspector.introspect(address)

        if not summary.introspectable:
            return ScanResult(collection=summary, message=NOT_INTROSPECTABLE_MESSAGE)

        ids = candidate_ids(summary.total_supply, options)
        return await self.scan_ids(summary, ids, options)

    async def scan_ids(
        self,
        summary: CollectionSummary,
        ids: Iterable[int],
        options: ScanOptions,
    ) -> ScanResult:
        """Scan explicit token IDs of ``summary``'s collection, in order.

        Probes run in batches of ``options.concurrency``; results are
        consumed in candidate order, so the output does not depend on
        which probe finishes first.
        """
        result = ScanResult(collection=summary)

        for batch in _batches(ids, options.concurrency):
            outcomes = await asyncio.gather(
                *(self._scan_token(summary, token_id, options) for token_id in batch),
                return_exceptions=True,
            )
            for token_id, outcome in zip(batch, outcomes, strict=True):
                result.scanned_ids.append(token_id)

                if isinstance(outcome, Exception):
                    logger.warning(
                        "token_scan_failed",
                        collection=summary.address,
                        token_id=token_id,
                        error=str(outcome) or type(outcome).__name__,
                    )
                    result.failed_ids.append(token_id)
                    continue
                if isinstance(outcome, BaseException):
                    raise outcome

                probe, record = outcome
                if probe.outcome is ProbeOutcome.FAILED:
                    result.failed_ids.append(token_id)
                if record is not None:
                    result.nfts.append(record)
                if len(result.nfts) >= options.limit:
                    break

            if len(result.nfts) >= options.limit:
                break

        result.nfts = sort_records(result.nfts, options.verified_first, options.newest_first)

        logger.info(
            "collection_scanned",
            collection=summary.address,
            found=len(result.nfts),
            scanned=len(result.scanned_ids),
            failed=len(result.failed_ids),
        )
        return result

    async def _scan_token(
        self,
        summary: CollectionSummary,
        token_id: int,
        options: ScanOptions,
    ) -> tuple[ProbeResult, NFTRecord | None]:
        probe = await self.prober.probe(summary.address, token_id)
        if not probe.exists or probe.owner is None:
            return probe, None

        if not options.resolve_metadata:
            return probe, self._build_record(summary, token_id, probe.owner)

        try:
            token_uri = await self.reader.token_uri(summary.address, token_id)
        except SquidMarketError as e:
            logger.debug(
                "token_uri_unavailable",
                collection=summary.address,
                token_id=token_id,
                error=str(e),
            )
            token_uri = ""

        metadata = await self.resolver.resolve(token_uri)
        if options.require_image and (metadata is None or metadata.image is None):
            return probe, None

        return probe, self._build_record(
            summary,
            token_id,
            probe.owner,
            token_uri=token_uri,
            name=metadata.name if metadata else None,
            description=metadata.description if metadata else None,
            image=metadata.image if metadata else None,
            attributes=metadata.attributes if metadata else [],
        )

    @staticmethod
    def _build_record(
        summary: CollectionSummary,
        token_id: int,
        owner: str,
        token_uri: str = "",
        name: str | None = None,
        description: str | None = None,
        image: str | None = None,
        attributes: list | None = None,
    ) -> NFTRecord:
        return NFTRecord(
            collection_address=summary.address,
            token_id=token_id,
            owner=owner,
            name=name or f"{summary.name} #{token_id}",
            description=description or "",
            image=image or PLACEHOLDER_IMAGE,
            attributes=attributes or [],
            token_uri=token_uri,
            collection_name=summary.name,
            is_verified=summary.verified,
        )
