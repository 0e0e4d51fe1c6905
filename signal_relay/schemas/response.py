"""
Response schemas returned by the Signal Relay webhook.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from signal_relay.schemas.signal import CamelModel


class RelayResponse(CamelModel):
    """
    Aggregated result of one relayed webhook.

    Attributes:
        success: Always True; failures use ErrorResponse
        request_id: Correlation id shared with both downstream services
        trade_result: Trade Service JSON, inline error, or None when skipped
        notification_result: Notification Service JSON, inline error, or None when skipped
    """

    success: bool = True
    request_id: str
    trade_result: Optional[Any] = None
    notification_result: Optional[Any] = None

    def to_wire(self) -> dict:
        """Serialize keeping skipped branches as explicit nulls."""
        return self.model_dump(by_alias=True)


class ErrorResponse(BaseModel):
    """Generic failure body; never carries exception detail."""

    success: bool = False
    error: str = Field(..., description="Public error message")


class DownstreamError(BaseModel):
    """Inline result for a downstream call that could not be completed."""

    success: bool = False
    error: str
