"""Integration-style tests for the dashboard HTTP API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from flightdesk.application.session import WalletSession
from flightdesk.config.dependencies import DashboardContext, get_dashboard_context
from flightdesk.main import app

from conftest import ACCOUNT, ETHER, FakeWalletProvider


@pytest.fixture
def client(dashboard_context):
    """Test client wired to the in-memory provider and contract."""

    app.dependency_overrides[get_dashboard_context] = lambda: dashboard_context
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def connected(client, contract):
    contract.seed_flight("Cairo - Luxor", 60, ETHER // 2)
    contract.seed_flight("Luxor - Aswan", 20, ETHER)
    response = client.post("/session/connect")
    assert response.status_code == 200
    return client


def test_health_and_metrics(client):
    assert client.get("/health").json()["status"] == "healthy"

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "flightdesk_http_requests_total" in response.text


def test_dashboard_before_connecting(client):
    payload = client.get("/dashboard").json()

    assert payload["session"]["connected"] is False
    assert payload["flights"] == []
    assert payload["balance"]["balance"] == "0"


def test_connect_renders_flights(connected):
    payload = connected.get("/dashboard").json()

    assert payload["session"]["account"] == ACCOUNT
    assert payload["session"]["provider_status"] == "connected"
    assert payload["flight_count"] == 2
    assert [f["id"] for f in payload["flights"]] == [1, 2]
    assert payload["flights"][0]["price_per_seat"] == "0.5"
    assert payload["sync"]["status"] == "idle"


def test_deposit_then_book(connected):
    deposit = connected.post("/funds/deposits", json={"amount": "2"})
    assert deposit.status_code == 200
    assert deposit.json()["dashboard"]["balance"]["balance"] == "2"

    booking = connected.post("/flights/1/bookings", json={"seats": 3})
    assert booking.status_code == 200
    body = booking.json()
    assert body["executed"] is True
    assert body["action"] == "book"
    flight = connected.get("/flights/1").json()
    assert flight["seats_available"] == 57
    assert connected.get("/funds/balance").json()["balance"] == "0.5"


def test_cancel_booking_returns_seats(connected):
    connected.post("/funds/deposits", json={"amount": "1"})
    connected.post("/flights/2/bookings", json={"seats": 1})

    response = connected.post("/flights/2/cancellations", json={"seats": 1})

    assert response.status_code == 200
    assert connected.get("/flights/2").json()["seats_available"] == 20


def test_create_flight(connected):
    response = connected.post(
        "/flights/", json={"name": "Aswan - Cairo", "seats": 90, "price": "0.75"}
    )

    assert response.status_code == 200
    flights = connected.get("/flights/").json()
    assert flights[-1] == {
        "id": 3,
        "name": "Aswan - Cairo",
        "seats_available": 90,
        "price_per_seat": "0.75",
        "price_per_seat_wei": 75 * 10**16,
        "is_active": True,
    }


def test_reverted_booking_maps_to_conflict(connected):
    response = connected.post("/flights/1/bookings", json={"seats": 1})

    assert response.status_code == 409
    assert response.json()["code"] == "call_reverted"
    notifications = connected.get("/notifications").json()
    assert notifications[-1]["kind"] == "call_reverted"
    assert notifications[-1]["level"] == "error"


def test_invalid_seat_count_is_rejected(connected, contract):
    response = connected.post("/flights/1/bookings", json={"seats": 0})

    assert response.status_code == 422
    assert response.json()["code"] == "invalid_input"
    assert not any(call[0] == "bookSeat" for call in contract.calls)


def test_oversized_amounts_are_422(connected, contract):
    deposit = connected.post("/funds/deposits", json={"amount": "1e80"})
    flight = connected.post("/flights/", json={"name": "Far", "seats": 1, "price": "1e60"})

    assert deposit.status_code == 422
    assert deposit.json()["code"] == "invalid_input"
    assert flight.status_code == 422
    assert flight.json()["code"] == "invalid_input"
    assert not any(call[0] in {"depositFunds", "addFlight"} for call in contract.calls)


def test_unknown_flight_is_404(connected):
    assert connected.get("/flights/99").status_code == 404


def test_notifications_can_be_dismissed(connected):
    connected.post("/funds/deposits", json={"amount": "1"})
    assert connected.get("/notifications").json()

    response = connected.delete("/notifications")

    assert response.status_code == 200
    assert response.json() == []


def test_connect_without_provider_is_503(store, contract):
    context = DashboardContext(
        store=store,
        session=WalletSession(FakeWalletProvider(available=False), lambda _p, _a: contract),
    )
    app.dependency_overrides[get_dashboard_context] = lambda: context
    try:
        response = TestClient(app).post("/session/connect")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json()["code"] == "provider_unavailable"


def test_actions_without_wallet_are_ignored(client, contract):
    response = client.post("/funds/deposits", json={"amount": "1"})

    assert response.status_code == 200
    assert response.json()["executed"] is False
    assert contract.calls == []


def test_connect_denied_is_403(client, provider):
    provider.deny = True

    response = client.post("/session/connect")

    assert response.status_code == 403
    assert response.json()["code"] == "authorization_denied"
