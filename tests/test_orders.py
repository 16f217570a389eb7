# tests/test_orders.py
import json

import httpx
import pytest
from sqlmodel import select

from app.core.errors import PaymentGatewayError
from app.core.midtrans_client import MidtransClient, get_midtrans_client
from app.main import app
from app.models.order import Order

from conftest import SNAP_REDIRECT, SNAP_TOKEN


def _order_payload(category, tier=None, **overrides):
    payload = {
        "category_id": str(category.id),
        "customer_name": "Rani",
        "email": "rani@gmail.com",
        "phone": "081234567890",
    }
    if tier is not None:
        payload["price_tier_id"] = str(tier.id)
    payload.update(overrides)
    return payload


def test_public_checkout_prices_order_and_returns_snap_token(client, wedding, snap_requests):
    resp = client.post("/api/orders", json=_order_payload(wedding))
    assert resp.status_code == 201

    body = resp.json()
    assert body["snap_token"] == SNAP_TOKEN
    assert body["redirect_url"] == SNAP_REDIRECT
    assert body["amount_due"] == 1_500_000

    order = body["order"]
    assert order["total_price"] == 5_000_000
    assert order["dp_percent"] == 30
    assert order["dp_amount"] == 1_500_000
    assert order["status"] == "PENDING"
    assert order["channel"] == "ONLINE"
    assert order["payment_status"] is None

    (request,) = snap_requests
    sent = json.loads(request.content)
    assert sent["transaction_details"] == {
        "order_id": f"order_{order['id']}",
        "gross_amount": 1_500_000,
    }
    assert sent["item_details"][0]["price"] == 1_500_000
    assert len(sent["item_details"][0]["name"]) <= 50
    assert request.headers["authorization"].startswith("Basic ")


def test_checkout_with_tier_uses_tier_price(client, wedding, wedding_premium):
    resp = client.post("/api/orders", json=_order_payload(wedding, wedding_premium))
    assert resp.status_code == 201
    assert resp.json()["order"]["total_price"] == 8_500_000
    assert resp.json()["amount_due"] == 2_550_000


def test_checkout_validation_errors_are_400(client, wedding):
    resp = client.post("/api/orders", json=_order_payload(wedding, email="not-an-email"))
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "validation_error"

    resp = client.post(
        "/api/orders",
        json=_order_payload(wedding, category_id="00000000-0000-4000-8000-000000000000"),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["field"] == "category_id"


def test_gateway_failure_leaves_no_order(client, session, wedding):
    def failing(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error_messages": ["Access denied"]})

    app.dependency_overrides[get_midtrans_client] = lambda: MidtransClient(
        server_key="bad", transport=httpx.MockTransport(failing)
    )

    resp = client.post("/api/orders", json=_order_payload(wedding))
    assert resp.status_code == 502
    assert resp.json()["detail"]["code"] == "payment_gateway_error"
    assert session.exec(select(Order)).all() == []


def test_gateway_client_raises_on_missing_token():
    client = MidtransClient(
        server_key="k",
        transport=httpx.MockTransport(lambda r: httpx.Response(201, json={})),
    )
    with pytest.raises(PaymentGatewayError):
        client.create_transaction({"transaction_details": {}})


def test_admin_order_flow(client, admin_headers, wedding):
    resp = client.post(
        "/api/orders/offline",
        json=_order_payload(wedding, dp_percent=50),
        headers=admin_headers,
    )
    assert resp.status_code == 201
    order = resp.json()
    assert order["channel"] == "OFFLINE"
    assert order["dp_amount"] == 2_500_000

    resp = client.post(f"/api/orders/{order['id']}/advance", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "CONSULTATION"

    resp = client.patch(
        f"/api/orders/{order['id']}",
        json={"status": "DRIVE_LINK", "drive_link": "https://drive.google.com/x"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "DRIVE_LINK"
    assert resp.json()["drive_link"] == "https://drive.google.com/x"

    resp = client.patch(
        f"/api/orders/{order['id']}",
        json={"status": "SESSION"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "invalid_transition"

    client.post(f"/api/orders/{order['id']}/advance", headers=admin_headers)
    resp = client.post(f"/api/orders/{order['id']}/advance", headers=admin_headers)
    assert resp.status_code == 400
    assert client.get(f"/api/orders/{order['id']}", headers=admin_headers).json()["status"] == "DONE"

    resp = client.post(f"/api/orders/{order['id']}/cancel", headers=admin_headers)
    assert resp.status_code == 400


def test_cancel_and_status_filter(client, admin_headers, wedding):
    first = client.post("/api/orders/offline", json=_order_payload(wedding), headers=admin_headers).json()
    client.post("/api/orders/offline", json=_order_payload(wedding), headers=admin_headers)

    resp = client.post(f"/api/orders/{first['id']}/cancel", headers=admin_headers)
    assert resp.json()["status"] == "CANCELLED"

    cancelled = client.get("/api/orders", params={"status": "CANCELLED"}, headers=admin_headers).json()
    assert [o["id"] for o in cancelled] == [first["id"]]
    assert len(client.get("/api/orders", headers=admin_headers).json()) == 2


def test_manual_payment_updates_payment_status(client, admin_headers, wedding):
    order = client.post("/api/orders/offline", json=_order_payload(wedding), headers=admin_headers).json()

    resp = client.post(
        f"/api/orders/{order['id']}/payments",
        json={"type": "DOWN_PAYMENT", "gross_amount": 1_500_000},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["provider"] == "manual"
    assert resp.json()["status"] == "settlement"
    assert resp.json()["paid_at"] is not None

    payments = client.get(f"/api/orders/{order['id']}/payments", headers=admin_headers).json()
    assert len(payments) == 1
    refreshed = client.get(f"/api/orders/{order['id']}", headers=admin_headers).json()
    assert refreshed["payment_status"] == "settlement"
    # payment does not move the stage
    assert refreshed["status"] == "PENDING"


def test_order_admin_routes_need_admin(client, staff_headers, wedding):
    assert client.get("/api/orders").status_code == 401
    assert client.get("/api/orders", headers=staff_headers).status_code == 403
