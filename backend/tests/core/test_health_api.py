import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_health(test_client: AsyncClient):
    response = await test_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == 200
    assert data["message"] == "Server is healthy"
    assert data["uptime"].endswith(("second", "seconds", "minute", "minutes"))
    assert "date" in data


async def test_welcome(test_client: AsyncClient):
    response = await test_client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Welcome to the Quote Builder API"
    assert data["API Version"] == "1.0.0"
