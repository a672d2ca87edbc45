from datetime import timedelta

import pytest
from httpx import AsyncClient

from quotebuilder.auth import config as auth_config
from quotebuilder.auth.security import create_access_token, decode_access_token


PROTECTED_URL = "/api/v1/quotations/"


@pytest.mark.asyncio
async def test_valid_token_is_accepted(test_client: AsyncClient, auth_headers):
    response = await test_client.get(PROTECTED_URL, headers=auth_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_missing_header(test_client: AsyncClient):
    response = await test_client.get(PROTECTED_URL)
    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_non_bearer_header(test_client: AsyncClient):
    response = await test_client.get(PROTECTED_URL, headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"


@pytest.mark.asyncio
async def test_garbage_token(test_client: AsyncClient):
    response = await test_client.get(PROTECTED_URL, headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


@pytest.mark.asyncio
async def test_expired_token(test_client: AsyncClient):
    token = create_access_token({"sub": "tester"}, expires_delta=timedelta(minutes=-5))
    response = await test_client.get(PROTECTED_URL, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


@pytest.mark.asyncio
async def test_token_signed_with_another_secret(test_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(auth_config, "JWT_SECRET_KEY", "some-other-secret")
    token = create_access_token({"sub": "tester"})
    monkeypatch.setattr(auth_config, "JWT_SECRET_KEY", "test-secret-key")

    response = await test_client.get(PROTECTED_URL, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unset_secret_is_a_server_error(test_client: AsyncClient, auth_headers, monkeypatch):
    monkeypatch.setattr(auth_config, "JWT_SECRET_KEY", None)
    response = await test_client.get(PROTECTED_URL, headers=auth_headers)
    assert response.status_code == 500
    assert response.json()["detail"] == "JWT secret is not configured"


def test_token_round_trip_keeps_claims():
    claims = decode_access_token(create_access_token({"sub": "42", "scope": "quotes"}))
    assert claims["sub"] == "42"
    assert claims["scope"] == "quotes"
    assert "exp" in claims
