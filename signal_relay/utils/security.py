"""
PURPOSE: Shared-secret comparison helpers for inbound webhook authentication.
"""

from typing import Optional


def constant_time_equals(provided: str, expected: str) -> bool:
    """
    PURPOSE: Compare two strings without exiting early on the first mismatch.

    Strings of different length fail immediately. Otherwise every code point
    pair is XORed and OR-accumulated, so the loop always visits every
    position.

    Args:
        provided: Value supplied by the caller.
        expected: Configured secret.

    Returns:
        bool: True only when both strings are identical.
    """
    if len(provided) != len(expected):
        return False

    result = 0
    for left, right in zip(provided, expected):
        result |= ord(left) ^ ord(right)

    return result == 0


def is_valid_api_key(api_key: Optional[object], secret: str) -> bool:
    """
    PURPOSE: Decide whether an inbound apiKey value authenticates the caller.

    CALLED BY: webhook.handler.authenticate()

    Missing, empty, and non-string keys never authenticate, and neither does
    anything when no secret is configured.

    Args:
        api_key: Raw `apiKey` value from the request body.
        secret:  Configured API_SECRET_KEY.

    Returns:
        bool: True when api_key matches the configured secret.
    """
    if not secret:
        return False
    if not isinstance(api_key, str) or not api_key:
        return False
    return constant_time_equals(api_key, secret)
