# Standard Library
from typing import Any, AsyncGenerator

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, AsyncEngine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# First-Party Libraries
from quotebuilder.main import app
from quotebuilder.auth import config as auth_config
from quotebuilder.auth.security import create_access_token
from quotebuilder.currency.cache import ConversionRateCache
from quotebuilder.currency.dependencies import get_conversion_cache
from quotebuilder.currency.exceptions import ExchangeRateFetchException
from quotebuilder.database import get_db_session
from quotebuilder.pdf.dependencies import get_pdf_generator
from quotebuilder.pdf.exceptions import PDFGenerationException
from quotebuilder.pdf.generator import AbstractPDFGenerator
from quotebuilder.quotations import models  # noqa: F401  registers the tables

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-key"

# --- Base fixtures ---

@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    """Every test runs with a known JWT secret unless it removes it."""
    monkeypatch.setattr(auth_config, "JWT_SECRET_KEY", TEST_JWT_SECRET)
    return TEST_JWT_SECRET


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Creates an in-memory database with all tables and yields one session on it."""
    engine: AsyncEngine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()


# --- PDF and currency doubles ---

class MockPDFGenerator(AbstractPDFGenerator):
    """Returns fake PDF bytes; fails for the reference Q-FAIL."""

    def __init__(self):
        self.generated = []

    async def generate_quotation_pdf(self, quotation: Any) -> bytes:
        if quotation.reference == "Q-FAIL":
            raise PDFGenerationException("Mock generation failed intentionally.")
        self.generated.append(quotation.reference)
        return f"%PDF-mock {quotation.reference}".encode("utf-8")


async def _failing_fetcher():
    raise ExchangeRateFetchException("offline in tests")


@pytest.fixture
def mock_pdf_generator() -> MockPDFGenerator:
    return MockPDFGenerator()


@pytest.fixture
def conversion_cache() -> ConversionRateCache:
    """A cache that never reaches the network and serves the fallback rate."""
    return ConversionRateCache(fetcher=_failing_fetcher, fallback_rate=83.0)


@pytest_asyncio.fixture(scope="function")
async def test_client(
    db_session: AsyncSession,
    mock_pdf_generator: MockPDFGenerator,
    conversion_cache: ConversionRateCache,
) -> AsyncGenerator[AsyncClient, None]:
    """httpx client on the app, wired to the test database and the doubles above."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_pdf_generator] = lambda: mock_pdf_generator
    app.dependency_overrides[get_conversion_cache] = lambda: conversion_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# --- Authentication ---

@pytest.fixture
def auth_headers() -> dict[str, str]:
    access_token = create_access_token(data={"sub": "tester"})
    return {"Authorization": f"Bearer {access_token}"}


# --- Payload factories ---

@pytest.fixture
def make_quotation_payload():
    """Builds a creation payload; keyword arguments override the defaults."""
    def _make(**overrides) -> dict:
        payload = {
            "reference": "Q-001",
            "client_name": "Acme Industries",
            "quote_number": "QN-1001",
            "currency": "USD",
            "valid_until": "2026-12-31",
            "parts": [
                {
                    "part_name": "Bracket",
                    "moq": 10,
                    "price_tiers": [
                        {"quantity": 10, "price": 12.5},
                        {"quantity": 100, "price": 9.75},
                    ],
                },
                {
                    "part_name": "Hinge",
                    "moq": 50,
                    "price_tiers": [{"quantity": 50, "price": 3.2}],
                },
            ],
        }
        payload.update(overrides)
        return payload
    return _make


@pytest_asyncio.fixture
async def created_quotation(test_client: AsyncClient, auth_headers, make_quotation_payload) -> dict:
    response = await test_client.post("/api/v1/quotations/", json=make_quotation_payload(), headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()
