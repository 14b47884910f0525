"""Test data factories."""

from tests.factories.collection import CollectionSummaryFactory, LaunchPoolFactory
from tests.factories.nft import ListingFactory, NFTRecordFactory

__all__ = [
    "CollectionSummaryFactory",
    "LaunchPoolFactory",
    "ListingFactory",
    "NFTRecordFactory",
]
