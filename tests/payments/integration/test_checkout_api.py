"""Integration tests for POST /checkout/initialize."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from payments.api import checkout_router
from shared.exceptions import register_error_handlers

CART = [{"id": "p1", "name": "Denim dungarees", "price_ghs": 50, "qty": 1}]


@pytest.fixture()
def client(gateway):
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(checkout_router)
    return TestClient(app, raise_server_exceptions=False)


def test_returns_authorization_url(client, gateway):
    response = client.post(
        "/checkout/initialize",
        json={"email": "ama@example.com", "phone": "0551234567", "items": CART},
    )

    assert response.status_code == 200
    assert response.json() == {
        "authorization_url": "https://checkout.fake-gateway.test/fake_ref_000001",
        "reference": "fake_ref_000001",
    }
    assert gateway.calls[0]["amount"] == 5000
    assert gateway.calls[0]["metadata"]["items"] == [{"product_id": "p1", "qty": 1}]


@pytest.mark.parametrize(
    "payload",
    [
        {"phone": "0551234567", "items": CART},
        {"email": "ama@example.com", "items": CART},
        {"email": "ama@example.com", "phone": "0551234567", "items": []},
        {},
    ],
)
def test_missing_fields(client, gateway, payload):
    response = client.post("/checkout/initialize", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: email, items, phone"
    assert gateway.calls == []


def test_items_without_ids(client):
    response = client.post(
        "/checkout/initialize",
        json={"email": "ama@example.com", "phone": "0551234567", "items": [{"price_ghs": 50, "qty": 1}]},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Cart items missing product ids"


def test_gateway_rejection_is_a_bad_gateway(client, gateway):
    gateway.configure(should_succeed=False, failure_reason="Invalid key")

    response = client.post(
        "/checkout/initialize",
        json={"email": "ama@example.com", "phone": "0551234567", "items": CART},
    )

    assert response.status_code == 502
    body = response.json()
    assert body["error"] == "Invalid key"
    assert body["details"] == {"status": False, "message": "Invalid key"}
