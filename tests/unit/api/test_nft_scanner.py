"""Tests for the multi-action scanner route."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from squidmarket.api.routes.nft_scanner import INVALID_ACTION_MESSAGE
from squidmarket.data.models.collection import CollectionSummary
from squidmarket.services.discovery.scanner import ScanResult
from squidmarket.services.discovery.service import MarketplacePage
from tests.factories import NFTRecordFactory


class TestNFTScannerRoute:
    """Tests for GET /api/nft-scanner."""

    @pytest.mark.parametrize("query", ["", "?action=bogus"])
    def test_invalid_action_is_400(self, client: TestClient, query: str) -> None:
        response = client.get(f"/api/nft-scanner{query}")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": INVALID_ACTION_MESSAGE}

    def test_scan_collection_requires_address(self, client: TestClient) -> None:
        response = client.get("/api/nft-scanner?action=scan-collection")

        assert response.status_code == 400
        assert response.json()["error"] == "Collection address required"

    def test_scan_collection(
        self, client: TestClient, mock_service: MagicMock, collection_address: str
    ) -> None:
        mock_service.collection_nfts.return_value = ScanResult(
            collection=CollectionSummary(address=collection_address),
            nfts=[NFTRecordFactory(collection_address=collection_address)],
        )

        response = client.get(
            f"/api/nft-scanner?action=scan-collection&collection={collection_address}&limit=5"
        )

        assert response.status_code == 200
        assert response.json()["count"] == 1
        assert response.json()["collection"] == collection_address
        mock_service.collection_nfts.assert_awaited_once_with(collection_address, 5)

    def test_user_nfts(
        self, client: TestClient, mock_service: MagicMock, owner_address: str
    ) -> None:
        response = client.get(f"/api/nft-scanner?action=user-nfts&owner={owner_address}")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": [],
            "count": 0,
            "owner": owner_address,
        }

    def test_marketplace_nfts_pagination(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        """
        Given: 25 marketplace NFTs
        When: The first page of 10 is requested
        Then: The page reports total, offset, limit and hasMore
        """
        items = [NFTRecordFactory() for _ in range(10)]
        mock_service.marketplace_nfts.return_value = MarketplacePage(
            items=items, total=25, offset=0, limit=10
        )

        response = client.get("/api/nft-scanner?action=marketplace-nfts&limit=10")

        data = response.json()
        assert response.status_code == 200
        assert data["count"] == 10
        assert data["total"] == 25
        assert data["hasMore"] is True
        mock_service.marketplace_nfts.assert_awaited_once_with(offset=0, limit=10)

    def test_known_collections(self, client: TestClient) -> None:
        response = client.get("/api/nft-scanner?action=known-collections")

        data = response.json()
        assert response.status_code == 200
        assert data["count"] == len(data["data"]) >= 1
        assert data["data"][0]["verified"] is True

    def test_scan_all(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.scan_known_collections.return_value = [NFTRecordFactory()]

        response = client.get("/api/nft-scanner?action=scan-all")

        assert response.status_code == 200
        assert response.json()["count"] == 1
