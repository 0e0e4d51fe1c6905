"""
PURPOSE: Inbound webhook handler for Signal Relay.

Checks the method, parses the JSON body, authenticates the embedded apiKey,
then forwards the trade and notification parts of the signal to their
services and aggregates both outcomes into one reply.

The handler is a function of (method, body, settings, forwarder) only; it
reads no global state.

CALLED BY:
    - api/routes_webhook.py (catch-all webhook route)
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Optional
from uuid import uuid4

from fastapi import status

from signal_relay.config.settings import Settings
from signal_relay.schemas.response import ErrorResponse, RelayResponse
from signal_relay.schemas.signal import InboundSignal
from signal_relay.utils.logger import get_logger
from signal_relay.utils.security import is_valid_api_key
from signal_relay.webhook.errors import (
    INTERNAL_ERROR_MESSAGE,
    AuthenticationFailedError,
    MethodNotAllowedError,
    RelayError,
)
from signal_relay.webhook.forwarder import ServiceForwarder

logger = get_logger(__name__)

API_KEY_FIELD = "apiKey"


@dataclass(frozen=True)
class WebhookReply:
    """Status code and JSON body produced for one inbound request."""

    status_code: int
    body: dict


def authenticate(payload: Any, settings: Settings) -> dict:
    """
    PURPOSE: Verify the apiKey in the parsed body and return the body without it.

    A body that is not a JSON object carries no key and is rejected like a
    missing key.

    Args:
        payload:  Parsed JSON body.
        settings: Configuration holding API_SECRET_KEY.

    Returns:
        dict: Copy of the payload with apiKey removed.

    Raises:
        AuthenticationFailedError: Missing, empty, or mismatched key.
    """
    if not settings.API_SECRET_KEY:
        logger.error("api_secret_key_not_configured")

    api_key = payload.get(API_KEY_FIELD) if isinstance(payload, dict) else None
    if not is_valid_api_key(api_key, settings.API_SECRET_KEY):
        logger.warning(
            "webhook_auth_failed",
            has_api_key=bool(api_key),
            body_is_object=isinstance(payload, dict),
        )
        raise AuthenticationFailedError()

    return {key: value for key, value in payload.items() if key != API_KEY_FIELD}


async def _skipped() -> None:
    return None


async def _dispatch(
    signal: InboundSignal,
    request_id: str,
    forwarder: ServiceForwarder,
    concurrent: bool,
) -> tuple[Optional[Any], Optional[Any]]:
    """
    PURPOSE: Run whichever forwarding branches the signal calls for.

    Returns:
        tuple: (trade_result, notification_result), None for skipped branches.
    """
    trade = signal.trade_request(request_id)
    notification = signal.notification_request(request_id)

    if trade is None:
        logger.info(
            "trade_branch_skipped",
            request_id=request_id,
            missing_fields=signal.missing_trade_fields(),
            invalid_fields=signal.invalid_trade_fields(),
        )
    if notification is None:
        logger.info(
            "notification_branch_skipped",
            request_id=request_id,
            notify_malformed=signal.notify is not None,
        )

    trade_call = forwarder.forward_trade(trade) if trade else _skipped()
    notification_call = (
        forwarder.forward_notification(notification) if notification else _skipped()
    )

    if concurrent:
        trade_result, notification_result = await asyncio.gather(
            trade_call, notification_call
        )
    else:
        trade_result = await trade_call
        notification_result = await notification_call

    return trade_result, notification_result


async def handle_webhook(
    method: str,
    body: bytes,
    settings: Settings,
    forwarder: ServiceForwarder,
) -> WebhookReply:
    """
    PURPOSE: Process one inbound webhook request end to end.

    Steps:
      1. Reject non-POST methods (405) without reading the body.
      2. Parse the JSON body.
      3. Authenticate apiKey with a constant-time comparison (403 on failure).
      4. Validate the rest into an InboundSignal and generate a requestId.
      5. Forward the trade and/or notification branches.
      6. Return {success, requestId, tradeResult, notificationResult}.

    Any unexpected exception yields a generic 500 reply; details are logged only.

    Args:
        method:    HTTP method of the inbound request.
        body:      Raw request body.
        settings:  Relay configuration.
        forwarder: Downstream forwarder.

    Returns:
        WebhookReply: Status code and JSON body for the caller.
    """
    try:
        if method.upper() != "POST":
            raise MethodNotAllowedError()

        payload = json.loads(body)
        fields = authenticate(payload, settings)
        signal = InboundSignal.model_validate(fields)

        request_id = str(uuid4())
        logger.info(
            "webhook_signal_received",
            request_id=request_id,
            exchange=signal.exchange,
            action=signal.action,
            symbol=signal.symbol,
            has_notify=signal.notify is not None,
        )

        trade_result, notification_result = await _dispatch(
            signal, request_id, forwarder, settings.FORWARD_CONCURRENTLY
        )

        logger.info("webhook_signal_relayed", request_id=request_id)
        response = RelayResponse(
            request_id=request_id,
            trade_result=trade_result,
            notification_result=notification_result,
        )
        return WebhookReply(status.HTTP_200_OK, response.to_wire())

    except RelayError as e:
        return WebhookReply(
            e.status_code,
            ErrorResponse(error=e.public_message).model_dump(),
        )
    except Exception as e:
        logger.error(
            "webhook_processing_failed",
            method=method,
            error=str(e),
            exception_type=type(e).__name__,
        )
        return WebhookReply(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(error=INTERNAL_ERROR_MESSAGE).model_dump(),
        )
