"""Shared pytest fixtures for SquidMarket tests.

This module provides:
- Test environment defaults (Supabase, RPC, gateway)
- Settings cache isolation between tests
- Mock Supabase client

Usage:
    def test_something(mock_supabase_client):
        repo = NFTRepository(mock_supabase_client)
"""

import os
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest

# =============================================================================
# Environment Configuration
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """Set up test environment variables.

    Defaults only apply to variables not already set.
    """
    original_env = os.environ.copy()

    os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
    os.environ.setdefault("SUPABASE_KEY", "test-key")
    os.environ.setdefault("RPC_URL", "https://rpc.test")
    os.environ.setdefault("IPFS_GATEWAY_URL", "https://gw.test")

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Rebuild settings from the environment for every test."""
    from squidmarket.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Database Mocks
# =============================================================================


@pytest.fixture
def mock_supabase_client() -> MagicMock:
    """Mock SupabaseClient whose ``client`` attribute is the raw client."""
    mock_client = MagicMock()
    mock_client.client = MagicMock()
    return mock_client


# =============================================================================
# Common Addresses
# =============================================================================


@pytest.fixture
def collection_address() -> str:
    """A syntactically valid collection address."""
    return "0x" + "ab" * 20


@pytest.fixture
def owner_address() -> str:
    """A syntactically valid wallet address."""
    return "0x" + "cd" * 20


@pytest.fixture
def marketplace_address() -> str:
    """A syntactically valid marketplace contract address."""
    return "0x" + "11" * 20
