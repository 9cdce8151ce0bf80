"""
Shared fixtures for RegimeWise tests.

The API client uses httpx's ASGI transport, so no live server is needed.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from regimewise.config import settings
from regimewise.main import app


@pytest_asyncio.fixture
async def client():
    """Async httpx client bound to the FastAPI app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def server_error_client():
    """
    Client for routes that raise. Starlette re-raises after the catch-all
    handler has sent its 500, so the transport must not propagate it.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def enforce_investment_cap(monkeypatch):
    """Turn on 80C clamping inside the tax computation for one test."""
    monkeypatch.setattr(settings, "enforce_investment_cap", True)
    yield
