"""Shared test fixtures."""

from collections.abc import Iterator

import pytest
from httpx import ASGITransport, AsyncClient

from src.dp_order.application.service import reset_workflow
from src.main import app


@pytest.fixture(autouse=True)
def fresh_workflow() -> Iterator[None]:
    """Each test starts with a fresh local chain and a disconnected wallet."""
    reset_workflow()
    yield
    reset_workflow()


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
