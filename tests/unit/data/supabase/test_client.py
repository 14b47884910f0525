"""Unit tests for the Supabase connection holder."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from squidmarket.core.exceptions import DatabaseConnectionError
from squidmarket.data.supabase.client import HEALTH_CHECK_TABLE, SupabaseClient


class TestSupabaseClient:
    """Tests for SupabaseClient."""

    def test_client_before_connect_raises(self) -> None:
        with pytest.raises(DatabaseConnectionError, match="not connected"):
            _ = SupabaseClient().client

    @pytest.mark.asyncio
    async def test_connect_uses_configured_schema_once(self) -> None:
        """
        Given: A reachable Supabase project
        When: connect() is called twice
        Then: One session is opened and exposed to repositories
        """
        raw = MagicMock()
        create = AsyncMock(return_value=raw)

        with patch("squidmarket.data.supabase.client.create_async_client", create):
            client = SupabaseClient()
            await client.connect()
            await client.connect()

        create.assert_awaited_once()
        assert create.await_args.kwargs["options"].schema == "public"
        assert client.client is raw

    @pytest.mark.asyncio
    async def test_health_check_when_disconnected(self) -> None:
        assert await SupabaseClient().health_check() == {
            "status": "disconnected",
            "healthy": False,
        }

    @pytest.mark.asyncio
    async def test_health_check_reads_cache_table(self) -> None:
        raw = MagicMock()
        raw.table.return_value.select.return_value.limit.return_value.execute = AsyncMock()
        client = SupabaseClient()
        client._client = raw

        result = await client.health_check()

        assert result == {"status": "connected", "healthy": True}
        raw.table.assert_called_once_with(HEALTH_CHECK_TABLE)

    @pytest.mark.asyncio
    async def test_health_check_reports_query_failure(self) -> None:
        raw = MagicMock()
        raw.table.return_value.select.return_value.limit.return_value.execute = AsyncMock(
            side_effect=RuntimeError("relation does not exist")
        )
        client = SupabaseClient()
        client._client = raw

        result = await client.health_check()

        assert result["healthy"] is False
        assert result["status"] == "error"
        assert "relation does not exist" in result["error"]
