"""Connection holder for the marketplace's Supabase (PostgREST) backend.

The repositories under ``data.supabase.repositories`` share one
connected ``SupabaseClient``; the API lifespan and the scripts open it
through ``get_supabase_client()`` and release it with
``close_supabase_client()``.
"""

from typing import Any

import structlog
from supabase._async.client import AsyncClient
from supabase._async.client import create_client as create_async_client
from supabase.lib.client_options import AsyncClientOptions
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from squidmarket.config.settings import Settings, get_settings
from squidmarket.core.exceptions import DatabaseConnectionError

log = structlog.get_logger(__name__)

HEALTH_CHECK_TABLE = "collection_cache"
CONNECT_ATTEMPTS = 3


class SupabaseClient:
    """Lazily connected handle on the collection cache, NFT, launch pool
    and waitlist tables.

    Connecting is retried; repository queries are not.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._client: AsyncClient | None = None

    @retry(
        stop=stop_after_attempt(CONNECT_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type(DatabaseConnectionError),
        reraise=True,
    )
    async def connect(self) -> None:
        """Open the PostgREST session for the configured schema.

        A no-op when already connected.

        Raises:
            DatabaseConnectionError: The project URL or key was rejected
                on every attempt.
        """
        if self._client is not None:
            return

        schema = self._settings.postgres_schema
        try:
            self._client = await create_async_client(
                self._settings.supabase_url,
                self._settings.supabase_key.get_secret_value(),
                options=AsyncClientOptions(schema=schema),
            )
        except Exception as e:
            log.error("supabase_connection_failed", error=str(e))
            raise DatabaseConnectionError(f"Supabase: {e}") from e

        log.info("supabase_connected", url=self._settings.supabase_url, schema=schema)

    async def disconnect(self) -> None:
        if self._client is not None:
            self._client = None
            log.info("supabase_disconnected")

    @property
    def client(self) -> AsyncClient:
        """The connected PostgREST client used by repositories.

        Raises:
            DatabaseConnectionError: ``connect()`` has not succeeded yet.
        """
        if self._client is None:
            raise DatabaseConnectionError("Supabase: Client not connected")
        return self._client

    async def health_check(self) -> dict[str, Any]:
        """Read one row of the collection cache table.

        Returns:
            ``{"status", "healthy"}`` plus ``"error"`` when the read failed.
        """
        if self._client is None:
            return {"status": "disconnected", "healthy": False}

        try:
            await self._client.table(HEALTH_CHECK_TABLE).select("address").limit(1).execute()
        except Exception as e:
            log.error("supabase_health_check_failed", table=HEALTH_CHECK_TABLE, error=str(e))
            return {"status": "error", "healthy": False, "error": str(e)}
        return {"status": "connected", "healthy": True}


_supabase_client: SupabaseClient | None = None


async def get_supabase_client() -> SupabaseClient:
    """Shared client, connected on first use."""
    global _supabase_client
    if _supabase_client is None:
        client = SupabaseClient()
        await client.connect()
        _supabase_client = client
    return _supabase_client


async def close_supabase_client() -> None:
    global _supabase_client
    if _supabase_client is not None:
        await _supabase_client.disconnect()
        _supabase_client = None
