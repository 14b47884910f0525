"""Application settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3

from squidmarket.constants.discovery import (
    COLLECTION_CACHE_TTL_SECONDS,
    DEFAULT_IPFS_GATEWAY,
    METADATA_TIMEOUT_SECONDS,
    SEQUENTIAL_PROBE_CAP,
)


class Settings(BaseSettings):
    """SquidMarket configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Application
    app_name: str = Field(default="SquidMarket", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Minimum log level"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database - Supabase
    supabase_url: str = Field(description="Supabase project URL")
    supabase_key: SecretStr = Field(description="Supabase API key")
    postgres_schema: str = Field(
        default="public", description="PostgreSQL schema for marketplace tables"
    )

    # Chain RPC
    rpc_url: str = Field(
        default="https://ethereum-sepolia-rpc.publicnode.com",
        description="EVM JSON-RPC endpoint URL",
    )
    chain_id: int = Field(default=11155111, ge=1, description="EVM chain id")
    rpc_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout for a single RPC call"
    )

    # Metadata
    ipfs_gateway_url: str = Field(
        default=DEFAULT_IPFS_GATEWAY,
        description="IPFS HTTP gateway used to rewrite ipfs:// URIs",
    )
    metadata_timeout_seconds: float = Field(
        default=METADATA_TIMEOUT_SECONDS,
        gt=0,
        description="Upper bound for a single metadata fetch",
    )

    # Discovery
    collection_cache_ttl_seconds: int = Field(
        default=COLLECTION_CACHE_TTL_SECONDS,
        ge=1,
        description="Freshness window of cached collection summaries",
    )
    scan_concurrency: int = Field(
        default=1, ge=1, le=32, description="Token probes in flight per scan"
    )
    scan_probe_cap: int = Field(
        default=SEQUENTIAL_PROBE_CAP, ge=1, description="Max IDs probed when supply is unknown"
    )
    scan_window: Literal["ascending", "recent"] = Field(
        default="ascending", description="Token ID window used when supply is known"
    )
    scan_newest_first: bool = Field(
        default=False, description="Sort scan results by descending token id"
    )

    # Contracts
    marketplace_address: str | None = Field(
        default=None, description="Marketplace contract address"
    )
    launchpad_address: str | None = Field(
        default=None, description="Launchpad contract address"
    )

    # Circuit Breaker
    circuit_breaker_threshold: int = Field(
        default=5, ge=1, description="Failures before circuit opens"
    )
    circuit_breaker_cooldown: int = Field(
        default=30, ge=1, description="Seconds before half-open"
    )

    @field_validator("supabase_url", "rpc_url")
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        """Validate HTTP URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @field_validator("ipfs_gateway_url")
    @classmethod
    def validate_gateway_url(cls, v: str) -> str:
        """Validate gateway URL and drop trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("IPFS gateway URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("marketplace_address", "launchpad_address")
    @classmethod
    def validate_contract_address(cls, v: str | None) -> str | None:
        """Validate optional contract addresses."""
        if v is None or v == "":
            return None
        if not Web3.is_address(v):
            raise ValueError(f"Invalid contract address: {v}")
        return v.lower()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]  # Values from env
