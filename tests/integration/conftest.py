"""Integration-test fixtures.

Flows run against the process-wide workflow wired to the local in-memory
chain, through the HTTP API only.
"""

import pytest
from httpx import AsyncClient

ALICE = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


@pytest.fixture
async def alice_client(client: AsyncClient) -> AsyncClient:
    """Client with Alice's wallet connected."""
    resp = await client.post("/api/v1/session/connect", json={"address": ALICE})
    assert resp.status_code == 200
    return client
