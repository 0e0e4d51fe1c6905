"""
PURPOSE: Pytest fixtures for Signal Relay tests.

Provides shared test data and mock objects including:
- Test configuration settings
- Fake Trade / Notification services backed by httpx.MockTransport
- A FastAPI TestClient wired to both
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

TRADE_URL = "https://trade-worker.test/trade"
NOTIFY_URL = "https://telegram-worker.test/notify"
TRADE_HOST = "trade-worker.test"
NOTIFY_HOST = "telegram-worker.test"


class FakeServices:
    """
    Stand-in for both downstream services.

    Records every request, answers with a configurable JSON body per host,
    and can simulate an unreachable host or a non-JSON reply.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses = {
            TRADE_HOST: (200, {"success": True}),
            NOTIFY_HOST: (200, {"success": True}),
        }
        self.unreachable: set[str] = set()
        self.non_json: set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if host in self.non_json:
            return httpx.Response(502, text="<html>Bad Gateway</html>")
        status_code, body = self.responses[host]
        return httpx.Response(status_code, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def bodies_to(self, host: str) -> list[dict]:
        return [json.loads(r.content) for r in self.requests_to(host)]


@pytest.fixture
def test_settings():
    """
    PURPOSE: Settings override with test values.

    Returns:
        Settings: Configuration object with test secrets and fake service URLs.
    """
    from signal_relay.config.settings import Settings

    return Settings(
        API_SECRET_KEY="test-api-key",
        INTERNAL_SERVICE_KEY="test-internal-key",
        TRADE_WORKER_URL=TRADE_URL,
        TELEGRAM_WORKER_URL=NOTIFY_URL,
        DOWNSTREAM_TIMEOUT_SECONDS=2.0,
        FORWARD_CONCURRENTLY=True,
        APP_ENV="development",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def services():
    """Fresh fake downstream services for each test."""
    return FakeServices()


@pytest.fixture
def forwarder(test_settings, services):
    """ServiceForwarder talking to the fake services."""
    from signal_relay.webhook.forwarder import ServiceForwarder

    return ServiceForwarder(test_settings, transport=services.transport())


@pytest.fixture
def client(test_settings, forwarder):
    """
    PURPOSE: TestClient for the relay app with settings and forwarder overridden.

    Returns:
        TestClient: Client whose downstream calls hit FakeServices.
    """
    from signal_relay.api.routes_webhook import get_forwarder
    from signal_relay.config.settings import get_settings
    from signal_relay.main import create_app

    app = create_app()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_forwarder] = lambda: forwarder
    return TestClient(app)


@pytest.fixture
def valid_payload():
    """Complete signal with trade fields and a custom notification."""
    return {
        "apiKey": "test-api-key",
        "exchange": "mexc",
        "action": "LONG",
        "symbol": "BTC_USDT",
        "quantity": 0.1,
        "price": 50000,
        "leverage": 20,
        "notify": {
            "message": "BTC Signal: LONG at 50000",
            "chatId": 123456789,
        },
    }
