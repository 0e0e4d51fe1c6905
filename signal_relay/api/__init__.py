"""
PURPOSE: API router exports for Signal Relay.
"""

from signal_relay.api.routes_webhook import router as webhook_router

__all__ = ["webhook_router"]
