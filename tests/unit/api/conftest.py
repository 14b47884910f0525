"""Fixtures for route tests: the real app with mocked dependencies."""

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from squidmarket.api.dependencies import (
    get_discovery_service,
    get_launch_pool_repo,
    get_nft_repo,
    get_transaction_builder,
    get_waitlist_repo,
)
from squidmarket.main import create_app
from squidmarket.services.discovery.registry import CollectionRegistry
from squidmarket.services.marketplace.transactions import MarketplaceTransactionBuilder


@pytest.fixture
def mock_service() -> MagicMock:
    """Mock DiscoveryService with async view methods."""
    service = MagicMock()
    service.list_collections = AsyncMock(return_value=([], 0))
    service.collection_preview = AsyncMock()
    service.collection_nfts = AsyncMock()
    service.collection_stats = AsyncMock()
    service.scan_known_collections = AsyncMock(return_value=[])
    service.user_nfts = AsyncMock(return_value=[])
    service.marketplace_nfts = AsyncMock()
    service.listing_details = AsyncMock(return_value=None)
    service.registry = CollectionRegistry()
    return service


@pytest.fixture
def mock_launch_pool_repo() -> MagicMock:
    repo = MagicMock()
    repo.list_all = AsyncMock(return_value=[])
    repo.create = AsyncMock()
    repo.update = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_nft_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_by_owner = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_waitlist_repo() -> MagicMock:
    repo = MagicMock()
    repo.add = AsyncMock()
    repo.count = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def app(
    mock_service: MagicMock,
    mock_launch_pool_repo: MagicMock,
    mock_nft_repo: MagicMock,
    mock_waitlist_repo: MagicMock,
    marketplace_address: str,
) -> Generator[FastAPI, None, None]:
    """Application with every data dependency overridden."""
    app = create_app()
    app.dependency_overrides[get_discovery_service] = lambda: mock_service
    app.dependency_overrides[get_launch_pool_repo] = lambda: mock_launch_pool_repo
    app.dependency_overrides[get_nft_repo] = lambda: mock_nft_repo
    app.dependency_overrides[get_waitlist_repo] = lambda: mock_waitlist_repo
    app.dependency_overrides[get_transaction_builder] = lambda: MarketplaceTransactionBuilder(
        marketplace_address
    )
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client that turns unhandled errors into 500 responses."""
    return TestClient(app, raise_server_exceptions=False)
