"""
PURPOSE: Catch-all webhook route for Signal Relay.

Every method on every path reaches the webhook handler, which answers 405
for anything but POST. The endpoint is public: callers authenticate with the
shared secret in the `apiKey` body field, since alert senders such as
TradingView cannot attach custom headers.

CALLED BY:
    - TradingView alerts and other signal sources (POST, public)
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from signal_relay.config.settings import Settings, get_settings
from signal_relay.utils.logger import get_logger
from signal_relay.webhook.forwarder import ServiceForwarder
from signal_relay.webhook.handler import handle_webhook

logger = get_logger(__name__)

router = APIRouter(tags=["webhook"])

RELAY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_forwarder(settings: Settings = Depends(get_settings)) -> ServiceForwarder:
    """
    PURPOSE: FastAPI dependency building the downstream forwarder.

    Overridden in tests to inject an httpx.MockTransport.

    Returns:
        ServiceForwarder: Forwarder bound to the current settings.
    """
    return ServiceForwarder(settings)


@router.api_route("/{path:path}", methods=RELAY_METHODS, include_in_schema=False)
async def receive_webhook(
    request: Request,
    path: str,
    settings: Settings = Depends(get_settings),
    forwarder: ServiceForwarder = Depends(get_forwarder),
) -> JSONResponse:
    """
    PURPOSE: Relay an inbound signal webhook to the Trade and Notification services.

    Args:
        request:   Inbound request (method and raw body are used).
        path:      Request path; any path is accepted.
        settings:  Relay configuration.
        forwarder: Downstream forwarder.

    Returns:
        JSONResponse: 200 aggregated result, or 403 / 405 / 500 failure body.
    """
    body = b"" if request.method.upper() != "POST" else await request.body()
    reply = await handle_webhook(request.method, body, settings, forwarder)

    logger.info(
        "webhook_request_completed",
        method=request.method,
        path=f"/{path}",
        status_code=reply.status_code,
    )
    return JSONResponse(status_code=reply.status_code, content=reply.body)
