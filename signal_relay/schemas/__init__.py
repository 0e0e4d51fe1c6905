"""
PURPOSE: Pydantic schemas for inbound webhook bodies, forwarded requests, and responses.
"""

from signal_relay.schemas.response import DownstreamError, ErrorResponse, RelayResponse
from signal_relay.schemas.signal import (
    InboundSignal,
    NotificationRequest,
    NotifySpec,
    TradeOrder,
    TradeRequest,
)

__all__ = [
    "DownstreamError",
    "ErrorResponse",
    "InboundSignal",
    "NotificationRequest",
    "NotifySpec",
    "RelayResponse",
    "TradeOrder",
    "TradeRequest",
]
