"""
PURPOSE: Downstream forwarder for Signal Relay.

Posts trade instructions to the Trade Service and chat notifications to the
Notification Service, tagging both with the internal service key and the
request's correlation id. Failures never propagate: they are logged and
returned as inline error results so the webhook can still answer 200.

CALLED BY:
    - webhook/handler.py (handle_webhook)
"""

from typing import Any, Optional

import httpx

from signal_relay.config.settings import Settings
from signal_relay.schemas.response import DownstreamError
from signal_relay.schemas.signal import NotificationRequest, TradeRequest
from signal_relay.utils.logger import get_logger

logger = get_logger(__name__)

TRADE_ERROR_MESSAGE = "Processing error"
NOTIFICATION_ERROR_MESSAGE = "Notification error"

INTERNAL_KEY_HEADER = "X-Internal-Key"
REQUEST_ID_HEADER = "X-Request-ID"


class ServiceForwarder:
    """
    PURPOSE: Sends relay payloads to the Trade and Notification services.

    One POST per call, no retries. The transport can be swapped for an
    httpx.MockTransport in tests.

    Attributes:
        _settings: Configuration holding URLs, internal key and timeout.
        _transport: Optional httpx transport passed to every client.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    # ════════════════════════════════════════════════════════════════
    # Public API
    # ════════════════════════════════════════════════════════════════

    async def forward_trade(self, trade: TradeRequest) -> Any:
        """
        PURPOSE: Forward a trade instruction to the Trade Service.

        Args:
            trade: Trade body including the correlation id.

        Returns:
            The Trade Service JSON response, or
            {"success": False, "error": "Processing error"} on failure.
        """
        try:
            return await self._post(
                self._settings.TRADE_WORKER_URL,
                trade.to_wire(),
                trade.request_id,
            )
        except Exception as e:
            logger.error(
                "trade_forward_failed",
                request_id=trade.request_id,
                error=str(e),
                exception_type=type(e).__name__,
            )
            return DownstreamError(error=TRADE_ERROR_MESSAGE).model_dump()

    async def forward_notification(self, notification: NotificationRequest) -> Any:
        """
        PURPOSE: Forward a chat notification to the Notification Service.

        Args:
            notification: Notification body including the correlation id.

        Returns:
            The Notification Service JSON response, or
            {"success": False, "error": "Notification error"} on failure.
        """
        try:
            return await self._post(
                self._settings.TELEGRAM_WORKER_URL,
                notification.to_wire(),
                notification.request_id,
            )
        except Exception as e:
            logger.error(
                "notification_forward_failed",
                request_id=notification.request_id,
                error=str(e),
                exception_type=type(e).__name__,
            )
            return DownstreamError(error=NOTIFICATION_ERROR_MESSAGE).model_dump()

    # ════════════════════════════════════════════════════════════════
    # Internal Helpers
    # ════════════════════════════════════════════════════════════════

    def _headers(self, request_id: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            INTERNAL_KEY_HEADER: self._settings.INTERNAL_SERVICE_KEY,
            REQUEST_ID_HEADER: request_id,
        }

    async def _post(self, url: str, body: dict, request_id: str) -> Any:
        """
        PURPOSE: POST a JSON body and return the decoded JSON response.

        The downstream body is passed through whatever the HTTP status; only
        transport errors and undecodable bodies raise.

        Raises:
            ValueError: If the service URL is not configured.
            httpx.HTTPError: On connection or timeout failures.
            json.JSONDecodeError: If the response body is not JSON.
        """
        if not url:
            raise ValueError("downstream service URL is not configured")

        async with httpx.AsyncClient(
            timeout=self._settings.DOWNSTREAM_TIMEOUT_SECONDS,
            transport=self._transport,
        ) as client:
            resp = await client.post(url, json=body, headers=self._headers(request_id))

        logger.info(
            "downstream_response_received",
            request_id=request_id,
            url=url,
            status_code=resp.status_code,
        )
        return resp.json()
