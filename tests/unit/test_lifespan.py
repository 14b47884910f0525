"""Tests for application lifespan management."""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from squidmarket.core.exceptions import DatabaseConnectionError


class TestLifespan:
    """Tests for startup and shutdown."""

    def test_startup_survives_database_failure(self) -> None:
        """
        Given: Supabase is unreachable at startup
        When: The application starts and stops
        Then: It serves requests and closes every client on shutdown
        """
        from squidmarket.main import create_app

        with (
            patch(
                "squidmarket.main.get_supabase_client",
                new=AsyncMock(side_effect=DatabaseConnectionError("refused")),
            ),
            patch("squidmarket.main.get_rpc_client", new=AsyncMock()) as get_rpc,
            patch("squidmarket.main.close_metadata_resolver", new=AsyncMock()) as close_resolver,
            patch("squidmarket.main.close_rpc_client", new=AsyncMock()) as close_rpc,
            patch("squidmarket.main.close_supabase_client", new=AsyncMock()) as close_db,
            patch("squidmarket.main.configure_logging"),
        ):
            with TestClient(create_app()) as client:
                response = client.get("/health")

            assert response.status_code == 200
            get_rpc.assert_awaited_once()
            close_resolver.assert_awaited_once()
            close_rpc.assert_awaited_once()
            close_db.assert_awaited_once()
