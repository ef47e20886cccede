"""Integration tests for the bookings API."""

from contextlib import asynccontextmanager
from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from app.auth.rate_limit import RateLimiter
from app.config import settings
from app.main import app

pytestmark = pytest.mark.asyncio


def _future_dates(offset_start: int = 30, nights: int = 2) -> tuple[str, str]:
    check_in = date.today() + timedelta(days=offset_start)
    check_out = check_in + timedelta(days=nights)
    return check_in.isoformat(), check_out.isoformat()


def _booking_json(offset_start: int = 30, nights: int = 2, **overrides) -> dict:
    ci, co = _future_dates(offset_start, nights)
    payload = {
        "guestName": "Malee",
        "roomNumber": "5",
        "checkIn": ci,
        "checkOut": co,
        "totalAmount": 1600,
    }
    payload.update(overrides)
    return payload


class TestCreateBooking:
    async def test_create_returns_201(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/v1/bookings", json=_booking_json(), headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Booking created successfully"
        data = body["data"]
        assert data["id"].startswith("BK")
        assert data["guestName"] == "Malee"
        assert data["roomNumber"] == "5"
        assert data["status"] == "confirmed"
        assert data["totalAmount"] == 1600
        assert data["nights"] == 2
        assert "createdAt" in data

    async def test_accepts_snake_case_and_numeric_room(self, client: AsyncClient, auth_headers: dict):
        ci, co = _future_dates()
        response = await client.post(
            "/api/v1/bookings",
            json={"guest_name": "Malee", "room_number": 7, "check_in": ci, "check_out": co},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["roomNumber"] == "7"

    async def test_overlap_returns_409(self, client: AsyncClient, auth_headers: dict, created_booking: dict):
        response = await client.post(
            "/api/v1/bookings",
            json=_booking_json(offset_start=31, nights=2),
            headers=auth_headers,
        )

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Room not available"
        assert body["message"] == "Room 5 is already booked for these dates"
        assert body["conflictingBooking"]["id"] == created_booking["id"]

    async def test_back_to_back_returns_201(self, client: AsyncClient, auth_headers: dict, created_booking: dict):
        response = await client.post(
            "/api/v1/bookings",
            json=_booking_json(offset_start=32, nights=2),
            headers=auth_headers,
        )
        assert response.status_code == 201

    async def test_validation_errors_return_400(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/v1/bookings",
            json={"guestName": "", "roomNumber": "5", "checkIn": "2020-01-01", "checkOut": "2020-01-02"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert body["errors"] == ["Guest name is required", "Cannot create booking for past dates"]

    async def test_missing_fields_all_reported(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/v1/bookings", json={}, headers=auth_headers)
        assert response.status_code == 400
        assert len(response.json()["errors"]) == 4

    async def test_guest_name_is_sanitized(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/v1/bookings",
            json=_booking_json(guestName="  <b>Somchai</b>  "),
            headers=auth_headers,
        )
        assert response.json()["data"]["guestName"] == "bSomchai/b"


class TestReadBookings:
    async def test_list(self, client: AsyncClient, auth_headers: dict, created_booking: dict):
        await client.post("/api/v1/bookings", json=_booking_json(roomNumber="6"), headers=auth_headers)

        response = await client.get("/api/v1/bookings")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 2

    async def test_list_filtered_by_room(self, client: AsyncClient, auth_headers: dict, created_booking: dict):
        await client.post("/api/v1/bookings", json=_booking_json(roomNumber="6"), headers=auth_headers)

        response = await client.get("/api/v1/bookings", params={"roomNumber": "5"})

        assert [b["id"] for b in response.json()["data"]] == [created_booking["id"]]

    async def test_list_filtered_by_status(self, client: AsyncClient, created_booking: dict):
        response = await client.get("/api/v1/bookings", params={"status": "cancelled"})
        assert response.json()["count"] == 0

    async def test_get(self, client: AsyncClient, created_booking: dict):
        response = await client.get(f"/api/v1/bookings/{created_booking['id']}")
        assert response.status_code == 200
        assert response.json()["guestName"] == "Somchai"

    async def test_get_missing_returns_404(self, client: AsyncClient):
        response = await client.get("/api/v1/bookings/BK000000000000")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "not found", "message": "Booking not found"}


class TestUpdateBooking:
    async def test_update(self, client: AsyncClient, auth_headers: dict, created_booking: dict):
        response = await client.put(
            f"/api/v1/bookings/{created_booking['id']}",
            json={"paymentStatus": "paid", "paidAmount": 1600},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["paymentStatus"] == "paid"
        assert data["paidAmount"] == 1600

    async def test_extend_own_stay(self, client: AsyncClient, auth_headers: dict, created_booking: dict):
        _, new_check_out = _future_dates(30, 4)
        response = await client.put(
            f"/api/v1/bookings/{created_booking['id']}",
            json={"checkOut": new_check_out},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["nights"] == 4

    async def test_move_onto_other_booking_returns_409(
        self, client: AsyncClient, auth_headers: dict, created_booking: dict
    ):
        other = await client.post("/api/v1/bookings", json=_booking_json(offset_start=40), headers=auth_headers)
        ci, co = _future_dates(31, 2)

        response = await client.put(
            f"/api/v1/bookings/{other.json()['data']['id']}",
            json={"checkIn": ci, "checkOut": co},
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Room is already booked for the requested dates"

    async def test_illegal_transition_returns_400(
        self, client: AsyncClient, auth_headers: dict, created_booking: dict
    ):
        url = f"/api/v1/bookings/{created_booking['id']}"
        await client.put(url, json={"status": "cancelled"}, headers=auth_headers)

        response = await client.put(url, json={"status": "checked_in"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["errors"] == ["Invalid status transition: cancelled -> checked_in"]

    async def test_update_missing_returns_404(self, client: AsyncClient, auth_headers: dict):
        response = await client.put("/api/v1/bookings/nope", json={"guestName": "X"}, headers=auth_headers)
        assert response.status_code == 404


class TestDeleteBooking:
    async def test_delete(self, client: AsyncClient, auth_headers: dict, created_booking: dict):
        url = f"/api/v1/bookings/{created_booking['id']}"

        response = await client.delete(url, headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Booking deleted successfully"}

        again = await client.delete(url, headers=auth_headers)
        assert again.status_code == 404


class TestWriteGuards:
    async def test_missing_key_returns_401(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/v1/bookings", json=_booking_json())
        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "Unauthorized"

    async def test_wrong_key_returns_401(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/v1/bookings", json=_booking_json(), headers={"X-API-Key": "wrong"})
        assert response.status_code == 401

    async def test_reads_need_no_key(self, client: AsyncClient, auth_headers: dict):
        response = await client.get("/api/v1/bookings")
        assert response.status_code == 200

    async def test_open_when_no_key_configured(self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings, "api_secret_key", "")
        response = await client.post("/api/v1/bookings", json=_booking_json())
        assert response.status_code == 201

    async def test_rate_limit_returns_429(
        self, client: AsyncClient, auth_headers: dict, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(app.state, "rate_limiter", RateLimiter(max_requests=2, window_seconds=60))
        headers = {**auth_headers, "X-Forwarded-For": "203.0.113.7, 10.0.0.1"}

        codes = [
            (await client.delete(f"/api/v1/bookings/missing-{n}", headers=headers)).status_code for n in range(3)
        ]

        assert codes == [404, 404, 429]

    async def test_rate_limit_response_body(
        self, client: AsyncClient, auth_headers: dict, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(app.state, "rate_limiter", RateLimiter(max_requests=1, window_seconds=60))
        await client.delete("/api/v1/bookings/missing", headers=auth_headers)

        response = await client.delete("/api/v1/bookings/missing", headers=auth_headers)

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert response.json()["detail"]["message"] == "Rate limit exceeded. Try again in 60s"

    async def test_clients_limited_separately(
        self, client: AsyncClient, auth_headers: dict, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(app.state, "rate_limiter", RateLimiter(max_requests=1, window_seconds=60))
        first = await client.delete("/api/v1/bookings/x", headers={**auth_headers, "X-Forwarded-For": "198.51.100.1"})
        second = await client.delete("/api/v1/bookings/x", headers={**auth_headers, "X-Forwarded-For": "198.51.100.2"})
        assert (first.status_code, second.status_code) == (404, 404)


class BrokenStorage:
    @asynccontextmanager
    async def unit_of_work(self):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))
        yield


class TestStorageFailure:
    async def test_storage_error_returns_503(self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(app.state, "storage", BrokenStorage())

        response = await client.get("/api/v1/bookings")

        assert response.status_code == 503
        assert response.json() == {"success": False, "error": "Storage unavailable"}


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
