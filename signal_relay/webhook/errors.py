"""
PURPOSE: Relay error taxonomy mapped to HTTP status codes and public messages.

CALLED BY:
    - webhook/handler.py (raised during request processing, converted to replies)
"""

from fastapi import status

INTERNAL_ERROR_MESSAGE = "Internal server error"


class RelayError(Exception):
    """
    PURPOSE: Base class for failures that end a request with a fixed public reply.

    Attributes:
        status_code: HTTP status returned to the caller.
        public_message: Message placed in the `error` field of the reply.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = INTERNAL_ERROR_MESSAGE


class MethodNotAllowedError(RelayError):
    """Raised for any method other than POST."""

    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    public_message = "Method not allowed"


class AuthenticationFailedError(RelayError):
    """Raised when apiKey is missing, empty, or wrong. The reason is never disclosed."""

    status_code = status.HTTP_403_FORBIDDEN
    public_message = "Authentication failed"
