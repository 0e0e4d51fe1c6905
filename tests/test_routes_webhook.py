"""
PURPOSE: HTTP-level tests for the catch-all webhook route.

Exercises the FastAPI application through TestClient with the downstream
services replaced by FakeServices.
"""

import pytest

from tests.conftest import NOTIFY_HOST, TRADE_HOST


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
def test_non_post_returns_405(client, method, valid_payload):
    response = client.request(method, "/", json=valid_payload)
    assert response.status_code == 405
    assert response.json() == {"success": False, "error": "Method not allowed"}
    assert response.headers["content-type"] == "application/json"


def test_wrong_key_returns_403(client, services, valid_payload):
    response = client.post("/", json=dict(valid_payload, apiKey="invalid-key!"))

    assert response.status_code == 403
    body = response.json()
    assert body == {"success": False, "error": "Authentication failed"}
    assert "tradeResult" not in body
    assert "notificationResult" not in body
    assert services.requests == []


def test_missing_key_looks_like_wrong_key(client, valid_payload):
    payload = dict(valid_payload)
    payload.pop("apiKey")
    missing = client.post("/", json=payload)
    wrong = client.post("/", json=dict(valid_payload, apiKey="nope"))
    assert missing.status_code == wrong.status_code == 403
    assert missing.json() == wrong.json()


def test_malformed_json_returns_500(client):
    response = client.post(
        "/",
        content=b'{"apiKey": "test-api-key",',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}


def test_partial_payload_accepted(client, services):
    response = client.post("/", json={"apiKey": "test-api-key"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["requestId"]
    assert body["tradeResult"] is None
    assert body["notificationResult"] is None
    assert services.requests == []


def test_valid_webhook_relays_both(client, services, valid_payload):
    response = client.post("/", json=valid_payload)

    assert response.status_code == 200
    body = response.json()
    assert body == {
        "success": True,
        "requestId": body["requestId"],
        "tradeResult": {"success": True},
        "notificationResult": {"success": True},
    }
    assert "apiKey" not in body

    for host in (TRADE_HOST, NOTIFY_HOST):
        [request] = services.requests_to(host)
        assert request.headers["X-Request-ID"] == body["requestId"]

    [trade] = services.bodies_to(TRADE_HOST)
    assert trade == {
        "requestId": body["requestId"],
        "exchange": "mexc",
        "action": "LONG",
        "symbol": "BTC_USDT",
        "quantity": 0.1,
        "price": 50000,
        "leverage": 20,
    }
    [notification] = services.bodies_to(NOTIFY_HOST)
    assert notification == {
        "requestId": body["requestId"],
        "message": "BTC Signal: LONG at 50000",
        "chatId": 123456789,
    }


def test_any_path_is_relayed(client, services, valid_payload):
    response = client.post("/hooks/tradingview", json=valid_payload)
    assert response.status_code == 200
    assert len(services.requests) == 2


def test_trade_service_down_still_200(client, services, valid_payload):
    services.unreachable.add(TRADE_HOST)

    response = client.post("/", json=valid_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["tradeResult"] == {"success": False, "error": "Processing error"}
    assert body["notificationResult"] == {"success": True}


@pytest.mark.parametrize("method", ["TRACE", "PROPFIND", "PURGE"])
def test_unregistered_method_returns_relay_405(client, services, method):
    response = client.request(method, "/", json={"apiKey": "x"})

    assert response.status_code == 405
    assert response.json() == {"success": False, "error": "Method not allowed"}
    assert services.requests == []


def test_malformed_notify_does_not_block_trade(client, services):
    response = client.post("/", json={
        "apiKey": "test-api-key",
        "exchange": "X",
        "action": "LONG",
        "symbol": "BTC",
        "quantity": 1,
        "notify": {"message": "hi"},
    })

    assert response.status_code == 200
    body = response.json()
    assert body["tradeResult"] == {"success": True}
    assert body["notificationResult"] is None
    assert len(services.requests_to(TRADE_HOST)) == 1
