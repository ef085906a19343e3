from __future__ import annotations

import json
from datetime import datetime
from zoneinfo import ZoneInfo

import httpx
import pytest

from app.application.exceptions import BookingApiError, BookingApiTimeoutError, BookingApiUnavailableError
from app.domain.entities.booking_request import BookingRequest
from app.infrastructure.backend.jadwa_client import JadwaBookingsClient


def _request() -> BookingRequest:
    return BookingRequest(
        consultant_id="C",
        service_id=None,
        booking_type="CONSULTATION",
        scheduled_at=datetime(2025, 6, 1, 14, 30, tzinfo=ZoneInfo("Asia/Riyadh")),
        selected_time_slot="14:30",
        duration=60,
        price=500.0,
        client_notes="",
        payment_status="PAID",
        payment_method="card",
        transaction_id="pay_123",
        payment_details='{"id": "pay_123", "status": "paid"}',
    )


def _client(handler) -> JadwaBookingsClient:
    return JadwaBookingsClient(
        base_url="https://api.example.test/api",
        access_token="token-1",
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )


def test_create_booking_posts_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"booking": {"id": "b-1", "status": "PENDING"}})

    booking = _client(handler).create_booking(_request())

    assert booking == {"id": "b-1", "status": "PENDING"}
    assert seen["url"] == "https://api.example.test/api/bookings"
    assert seen["auth"] == "Bearer token-1"
    assert seen["body"]["scheduledAt"] == "2025-06-01T14:30:00+03:00"
    assert seen["body"]["transactionId"] == "pay_123"


def test_backend_error_text_is_kept():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": "Time slot already booked"})

    with pytest.raises(BookingApiError) as exc:
        _client(handler).create_booking(_request())

    assert str(exc.value) == "Time slot already booked"
    assert exc.value.status_code == 409


def test_backend_error_without_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={})

    with pytest.raises(BookingApiError, match="HTTP error! status: 500"):
        _client(handler).create_booking(_request())


def test_backend_error_with_unreadable_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(BookingApiError, match="Network error"):
        _client(handler).create_booking(_request())


def test_timeout_is_reported():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(BookingApiTimeoutError):
        _client(handler).create_booking(_request())


def test_connection_failure_is_reported():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BookingApiUnavailableError):
        _client(handler).create_booking(_request())


def test_unauthorized_without_error_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={})

    with pytest.raises(BookingApiError, match="Unauthorized. Please login again.") as exc:
        _client(handler).create_booking(_request())

    assert exc.value.status_code == 401


def test_unauthorized_keeps_backend_error_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Token expired"})

    with pytest.raises(BookingApiError, match="Token expired"):
        _client(handler).create_booking(_request())
