"""Token metadata resolver with IPFS gateway rewriting."""

import asyncio
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from squidmarket.config.settings import get_settings
from squidmarket.constants.discovery import IPFS_SCHEME, METADATA_USER_AGENT
from squidmarket.data.models.nft import NFTAttribute

logger = structlog.get_logger(__name__)

FETCHABLE_SCHEMES = ("http://", "https://", IPFS_SCHEME)


class TokenMetadata(BaseModel):
    """Normalized off-chain metadata of a single token."""

    name: str | None = None
    description: str | None = None
    image: str | None = None
    attributes: list[NFTAttribute] = Field(default_factory=list)


def rewrite_ipfs(uri: str, gateway_url: str) -> str:
    """Rewrite ``ipfs://<cid>`` to ``<gateway>/ipfs/<cid>``.

    Non-IPFS URIs are returned untouched.

    Example:
        >>> rewrite_ipfs("ipfs://bafy123", "https://gateway.pinata.cloud")
        'https://gateway.pinata.cloud/ipfs/bafy123'
    """
    if not uri.startswith(IPFS_SCHEME):
        return uri
    path = uri[len(IPFS_SCHEME) :]
    # Some contracts emit ipfs://ipfs/<cid>
    path = path.removeprefix("ipfs/")
    return f"{gateway_url.rstrip('/')}/ipfs/{path}"


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def normalize_attributes(raw: Any) -> list[NFTAttribute]:
    """Turn a metadata ``attributes`` array into ordered trait entries.

    Entries that are not objects or have no ``trait_type`` are dropped.
    """
    if not isinstance(raw, list):
        return []

    attributes: list[NFTAttribute] = []
    for item in raw:
        if not isinstance(item, dict) or "trait_type" not in item:
            continue
        value = item.get("value")
        if isinstance(value, (dict, list)):
            continue
        try:
            attributes.append(NFTAttribute(trait_type=str(item["trait_type"]), value=value))
        except PydanticValidationError:
            continue
    return attributes


class MetadataResolver:
    """Fetches and normalizes token metadata JSON.

    ``resolve`` never raises: an unsupported URI, a timeout, a network
    error, a non-2xx status or a non-object body all yield ``None`` so
    callers can fall back to placeholders.

    Example:
        resolver = MetadataResolver()
        metadata = await resolver.resolve("ipfs://bafy123")
        await resolver.close()
    """

    def __init__(
        self,
        gateway_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            gateway_url: IPFS gateway base URL (defaults to settings)
            timeout: Upper bound in seconds for a whole fetch (defaults to settings)
        """
        settings = get_settings()
        self.gateway_url = (gateway_url or settings.ipfs_gateway_url).rstrip("/")
        self.timeout = timeout or settings.metadata_timeout_seconds
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={
                    "Accept": "application/json",
                    "User-Agent": METADATA_USER_AGENT,
                },
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def rewrite(self, uri: str) -> str:
        """Rewrite an IPFS URI against this resolver's gateway."""
        return rewrite_ipfs(uri, self.gateway_url)

    async def _fetch_json(self, url: str) -> Any:
        client = await self._get_client()
        response = await client.get(url)
        response.raise_for_status()
        return response.json()

    async def resolve(self, token_uri: str | None) -> TokenMetadata | None:
        """Resolve a token URI to normalized metadata.

        Args:
            token_uri: Raw URI returned by ``tokenURI``

        Returns:
            TokenMetadata, or None when no metadata is available
        """
        if not token_uri or not token_uri.startswith(FETCHABLE_SCHEMES):
            return None

        url = self.rewrite(token_uri)
        try:
            # The httpx timeout is per phase; wait_for bounds the whole fetch
            data = await asyncio.wait_for(self._fetch_json(url), timeout=self.timeout)
        except TimeoutError:
            logger.debug("metadata_fetch_timeout", url=url, timeout=self.timeout)
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("metadata_fetch_failed", url=url, error=str(e) or type(e).__name__)
            return None
        except ValueError:
            logger.debug("metadata_invalid_json", url=url)
            return None

        if not isinstance(data, dict):
            logger.debug("metadata_not_an_object", url=url)
            return None

        image = _optional_text(data.get("image"))
        return TokenMetadata(
            name=_optional_text(data.get("name")),
            description=_optional_text(data.get("description")),
            image=self.rewrite(image) if image else None,
            attributes=normalize_attributes(data.get("attributes")),
        )


# Singleton instance
_metadata_resolver: MetadataResolver | None = None


async def get_metadata_resolver() -> MetadataResolver:
    """Get or create the metadata resolver singleton."""
    global _metadata_resolver
    if _metadata_resolver is None:
        _metadata_resolver = MetadataResolver()
    return _metadata_resolver


async def close_metadata_resolver() -> None:
    """Close and clear the metadata resolver singleton."""
    global _metadata_resolver
    if _metadata_resolver is not None:
        await _metadata_resolver.close()
        _metadata_resolver = None
