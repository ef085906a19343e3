from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from app.application.use_cases.recover_booking import RecoverBookingUseCase
from app.application.use_cases.save_draft import SaveDraftUseCase
from app.core.config import settings
from app.main import app
from app.infrastructure.backend.mock_bookings_api import MockBookingsApi
from app.infrastructure.store.memory_store import MemoryDraftStore
from app.wiring.dependencies import get_recover_booking_use_case, get_save_draft_use_case

TZ = ZoneInfo("Asia/Riyadh")

DRAFT_BODY = {
    "values": {
        "date": "2025-06-01T00:00:00+03:00",
        "time": "2025-06-01T14:30:00+03:00",
        "consultationType": "economic",
        "details": "Market entry",
        "paymentMethod": "mada",
    },
    "consultant": {"id": "C", "name": "Consultant C", "pricePerSession": 500, "duration": 60},
    "service": {"id": "svc-1", "title": "Market study"},
}


@pytest.fixture
def backend():
    return MockBookingsApi()


@pytest.fixture
def client(backend):
    store = MemoryDraftStore()
    app.dependency_overrides[get_save_draft_use_case] = lambda: SaveDraftUseCase(store=store, timezone=TZ)
    app.dependency_overrides[get_recover_booking_use_case] = lambda: RecoverBookingUseCase(
        store=store, bookings_api=backend, timezone=TZ
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_draft_then_payment_result(client, backend):
    saved = client.put("/client/bookings/draft", json=DRAFT_BODY)
    assert saved.status_code == 200
    body = saved.json()
    assert body["saved"] is True
    assert body["callbackUrl"].endswith(f"/client/payment-result?attempt={body['attemptId']}")

    resp = client.get(
        "/client/payment-result",
        params={"status": "paid", "id": "pay_123", "attempt": body["attemptId"]},
    )
    assert resp.status_code == 200
    result = resp.json()
    assert result["status"] == "success"
    assert result["redirectTo"] == "/client/bookings"
    assert result["booking"]["selectedTimeSlot"] == "14:30"
    assert backend.created[0]["bookingType"] == "ECONOMIC"

    # draft was consumed: a reload only finds the lost-context path
    again = client.get(
        "/client/payment-result",
        params={"status": "paid", "id": "pay_123", "attempt": body["attemptId"]},
    ).json()
    assert again["status"] == "success"
    assert again["warning"]
    assert len(backend.created) == 1


def test_draft_not_saved_without_consultant(client):
    body = {"values": DRAFT_BODY["values"]}
    resp = client.put("/client/bookings/draft", json=body)

    assert resp.status_code == 200
    assert resp.json()["saved"] is False
    assert resp.json()["callbackUrl"] is None


def test_draft_rejects_bad_attempt_id(client):
    resp = client.put("/client/bookings/draft", json={**DRAFT_BODY, "attemptId": "a/b"})
    assert resp.status_code == 400


def test_draft_fail_closed_returns_503(client):
    app.dependency_overrides[get_save_draft_use_case] = lambda: SaveDraftUseCase(
        store=MemoryDraftStore(max_items=0), timezone=TZ, failure_policy="fail_closed"
    )
    resp = client.put("/client/bookings/draft", json=DRAFT_BODY)
    assert resp.status_code == 503


def test_failed_payment_message(client):
    resp = client.get("/client/payment-result?status=failed&message=Card%20declined")

    assert resp.json()["status"] == "error"
    assert resp.json()["message"] == "Card declined"


def test_missing_params(client):
    resp = client.get("/client/payment-result")

    assert resp.json() == {
        "status": "error",
        "message": "Invalid payment response",
        "warning": None,
        "booking": None,
        "redirectTo": None,
        "redirectAfterMs": None,
    }


def test_moyasar_form_requires_key(client, monkeypatch):
    monkeypatch.setattr(settings, "MOYASAR_PUBLISHABLE_KEY", None)
    resp = client.post("/client/payments/moyasar/form", json={"amount": 500, "description": "Session", "attemptId": "abc"})
    assert resp.status_code == 503


def test_moyasar_form(client, monkeypatch):
    monkeypatch.setattr(settings, "MOYASAR_PUBLISHABLE_KEY", "pk_test_1")
    resp = client.post(
        "/client/payments/moyasar/form",
        json={"amount": 500, "description": "Session", "attemptId": "abc"},
    )
    assert resp.status_code == 200
    assert resp.json()["amount"] == 50000
    assert resp.json()["callback_url"].endswith("?attempt=abc")


def test_moyasar_form_requires_attempt_when_drafts_are_scoped(client, monkeypatch):
    monkeypatch.setattr(settings, "MOYASAR_PUBLISHABLE_KEY", "pk_test_1")
    monkeypatch.setattr(settings, "DRAFT_SCOPE_PER_ATTEMPT", True)

    saved = client.put("/client/bookings/draft", json=DRAFT_BODY)
    assert saved.json()["saved"] is True

    resp = client.post("/client/payments/moyasar/form", json={"amount": 500, "description": "Session"})
    assert resp.status_code == 400


def test_moyasar_form_rejects_malformed_attempt(client, monkeypatch):
    monkeypatch.setattr(settings, "MOYASAR_PUBLISHABLE_KEY", "pk_test_1")
    resp = client.post(
        "/client/payments/moyasar/form",
        json={"amount": 500, "description": "Session", "attemptId": "../etc"},
    )
    assert resp.status_code == 400


def test_moyasar_form_without_attempt_in_legacy_mode(client, monkeypatch):
    monkeypatch.setattr(settings, "MOYASAR_PUBLISHABLE_KEY", "pk_test_1")
    monkeypatch.setattr(settings, "DRAFT_SCOPE_PER_ATTEMPT", False)
    resp = client.post("/client/payments/moyasar/form", json={"amount": 500, "description": "Session"})

    assert resp.status_code == 200
    assert resp.json()["callback_url"].endswith("/client/payment-result")
