"""Shared test configuration and fixtures.

API tests run against the in-memory storage strategy. Each test gets a fresh
store and rate limiter swapped onto ``app.state``, so no database is needed.
"""

from collections.abc import AsyncGenerator
from datetime import date, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.auth.rate_limit import RateLimiter
from app.config import settings
from app.main import app
from app.repositories.memory import MemoryStorage

TEST_API_KEY = "test-api-key"


def future_dates(offset_start: int = 30, nights: int = 2) -> tuple[str, str]:
    """Return a (check_in, check_out) pair safely in the future as ISO strings."""
    check_in = date.today() + timedelta(days=offset_start)
    check_out = check_in + timedelta(days=nights)
    return check_in.isoformat(), check_out.isoformat()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest_asyncio.fixture
async def client(storage: MemoryStorage, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to a fresh in-memory store."""
    monkeypatch.setattr(app.state, "storage", storage)
    monkeypatch.setattr(app.state, "rate_limiter", RateLimiter(max_requests=1000, window_seconds=60))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def auth_headers(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Configure an API key and return headers that carry it."""
    monkeypatch.setattr(settings, "api_secret_key", TEST_API_KEY)
    return {"X-API-Key": TEST_API_KEY}


@pytest_asyncio.fixture
async def created_booking(client: AsyncClient, auth_headers: dict) -> dict:
    """Create and return a booking for room 5 via the API."""
    ci, co = future_dates(30, 2)
    response = await client.post(
        "/api/v1/bookings",
        json={
            "guestName": "Somchai",
            "roomNumber": "5",
            "checkIn": ci,
            "checkOut": co,
            "totalAmount": 1600,
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, f"Failed to create booking: {response.text}"
    return response.json()["data"]
