"""Marketplace transaction building."""

from squidmarket.services.marketplace.transactions import (
    MarketplaceTransactionBuilder,
    parse_price,
)

__all__ = ["MarketplaceTransactionBuilder", "parse_price"]
