"""
PURPOSE: Webhook module for Signal Relay — authenticates inbound alerts and forwards them.

Provides the request handler and the downstream forwarder used by the
catch-all webhook route.
"""
