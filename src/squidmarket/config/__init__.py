"""Configuration module for SquidMarket.

Usage:
    from squidmarket.config import get_settings

    settings = get_settings()  # Cached singleton
    print(settings.ipfs_gateway_url)

Note:
    There is no module-level `settings` instance; required env vars are
    only read when `get_settings()` is first called.
"""

from squidmarket.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
