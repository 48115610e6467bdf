"""Shared fixtures: scenario settings, stubbed upstream, API client."""

import httpx
import pytest
import pytest_asyncio

from listinglens.config import Settings
from tests.helpers import MARKETPLACE, SHORT_LINK, FakeSleep


@pytest.fixture
def scenario_settings() -> Settings:
    return Settings(
        MARKETPLACE_DOMAIN=MARKETPLACE,
        SHORT_LINK_DOMAIN=SHORT_LINK,
        LOG_FORMAT="text",
    )


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def make_client():
    """Build an httpx.AsyncClient whose transport is the given handler."""

    def _make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest_asyncio.fixture
async def client():
    """API client bound to the FastAPI app, no network involved."""
    from listinglens.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
