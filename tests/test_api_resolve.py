"""Integration tests for POST /v1/resolve."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from listinglens.services.resolver import (
    AllStrategiesFailed,
    IdentifierNotFound,
    RedirectResolutionFailed,
    ResolvedMetadata,
    StrategyFailed,
    UnsupportedDomain,
)

RESOLVED = ResolvedMetadata(
    identifier="B0ABCDEFGH",
    title="USB-C Cable 2m",
    description="Braided USB-C to USB-C cable",
    image="https://m.media-amazon.com/images/I/71abcDEF12L.jpg",
    source_url="https://www.amazon.co.jp/dp/B0ABCDEFGH",
    strategy="markup",
)


class TestResolveEndpoint:
    @pytest.mark.asyncio
    async def test_success(self, client: AsyncClient):
        with patch(
            "listinglens.api.resolve.resolve_product_metadata",
            new_callable=AsyncMock,
            return_value=RESOLVED,
        ) as mock_resolve:
            resp = await client.post("/v1/resolve", json={"url": "amzn.to/3xYz"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["data"]["identifier"] == "B0ABCDEFGH"
        assert data["data"]["strategy"] == "markup"
        assert data["data"]["image"] == RESOLVED.image
        mock_resolve.assert_awaited_once_with("amzn.to/3xYz")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error, status, code",
        [
            (UnsupportedDomain("https://example.org/x", "amazon.co.jp"), 422, "UNSUPPORTED_DOMAIN"),
            (IdentifierNotFound("https://www.amazon.co.jp/s?k=x"), 422, "IDENTIFIER_NOT_FOUND"),
            (RedirectResolutionFailed("https://amzn.to/x", "HTTP 404"), 502, "REDIRECT_RESOLUTION_FAILED"),
        ],
    )
    async def test_error_mapping(self, client: AsyncClient, error, status, code):
        error.phase = "normalizing"
        with patch(
            "listinglens.api.resolve.resolve_product_metadata",
            new_callable=AsyncMock,
            side_effect=error,
        ):
            resp = await client.post("/v1/resolve", json={"url": "whatever"})

        assert resp.status_code == status
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == code
        assert body["error"]["phase"] == "normalizing"
        assert body["error"]["attempts"] == []

    @pytest.mark.asyncio
    async def test_all_strategies_failed_lists_attempts(self, client: AsyncClient):
        error = AllStrategiesFailed(
            [
                StrategyFailed("markup", "HTTP 503 as browser"),
                StrategyFailed("preview", "discordbot: HTTP 503 as discordbot"),
                StrategyFailed("generic", "ConnectError: refused"),
            ],
            phase="fetching",
        )
        with patch(
            "listinglens.api.resolve.resolve_product_metadata",
            new_callable=AsyncMock,
            side_effect=error,
        ):
            resp = await client.post("/v1/resolve", json={"url": "https://www.amazon.co.jp/dp/B0ABCDEFGH"})

        assert resp.status_code == 502
        attempts = resp.json()["error"]["attempts"]
        assert [a["strategy"] for a in attempts] == ["markup", "preview", "generic"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["https://[bad", "[marketplace.example/dp/B0ABCDEFGH"])
    async def test_malformed_url_is_unsupported_domain(self, client: AsyncClient, url):
        resp = await client.post("/v1/resolve", json={"url": url})

        assert resp.status_code == 422
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "UNSUPPORTED_DOMAIN"
        assert body["error"]["phase"] == "normalizing"

    @pytest.mark.asyncio
    async def test_empty_url_rejected_by_validation(self, client: AsyncClient):
        resp = await client.post("/v1/resolve", json={"url": ""})
        assert resp.status_code == 422
