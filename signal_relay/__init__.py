"""
PURPOSE: Signal Relay — authenticated webhook relay for trading signals.

Receives TradingView-style alert webhooks, checks the shared secret, and
forwards trade instructions and chat notifications to the downstream
Trade and Notification services.
"""

__version__ = "1.0.0"
