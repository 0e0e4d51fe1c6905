"""
PURPOSE: FastAPI application factory and lifecycle management for Signal Relay.

Initializes the FastAPI application with:
- The catch-all webhook router
- A 405 handler for methods the router rejects itself
- A generic exception handler that never exposes internals
- Startup logging and configuration checks
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from signal_relay import __version__
from signal_relay.api import webhook_router
from signal_relay.config.settings import settings
from signal_relay.schemas.response import ErrorResponse
from signal_relay.utils.logger import get_logger, setup_logging
from signal_relay.webhook.errors import INTERNAL_ERROR_MESSAGE, MethodNotAllowedError


logger = get_logger(__name__)


# ════════════════════════════════════════════════════════════════
# Lifecycle Events
# ════════════════════════════════════════════════════════════════


async def on_startup() -> None:
    """
    PURPOSE: Configure logging and report configuration gaps.

    CALLED BY: FastAPI lifespan startup
    """
    setup_logging(settings.LOG_LEVEL)
    logger.info(
        "application_startup",
        version=__version__,
        log_level=settings.LOG_LEVEL,
        forward_concurrently=settings.FORWARD_CONCURRENTLY,
    )

    missing = settings.get_missing_settings()
    if missing:
        logger.warning(
            "missing_configuration",
            message="Unset settings; affected requests will be rejected or fail downstream.",
            settings=missing,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    PURPOSE: Manage application lifespan with startup and shutdown events.

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    await on_startup()

    yield

    logger.info("application_shutdown_complete")


# ════════════════════════════════════════════════════════════════
# Exception Handlers
# ════════════════════════════════════════════════════════════════


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    PURPOSE: Render router-level HTTP errors in the relay's error body.

    Methods the webhook route does not register (TRACE, CONNECT, custom
    verbs) are rejected by the router before the handler runs; they get the
    same 405 body as every other non-POST method.

    CALLED BY: FastAPI exception handler middleware

    Args:
        request: HTTP request that failed routing
        exc: HTTPException raised by the router

    Returns:
        JSONResponse: {success: false, error} with the original status and headers
    """
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = MethodNotAllowedError.public_message
    else:
        message = str(exc.detail)

    logger.info(
        "http_exception",
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    PURPOSE: Handle unexpected exceptions with logging and safe error response.

    CALLED BY: FastAPI exception handler middleware

    Args:
        request: HTTP request that raised exception
        exc: Exception that was raised

    Returns:
        JSONResponse: Safe error response without exposing internals
    """
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exception_type=type(exc).__name__
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=INTERNAL_ERROR_MESSAGE).model_dump(),
    )


# ════════════════════════════════════════════════════════════════
# FastAPI Application Factory
# ════════════════════════════════════════════════════════════════


def create_app() -> FastAPI:
    """
    PURPOSE: Create and configure the FastAPI application.

    Docs and OpenAPI routes are disabled: every path belongs to the webhook.

    CALLED BY: Application entrypoint (uvicorn, docker, etc)

    Returns:
        FastAPI: Configured FastAPI application ready to run

    Raises:
        ValueError: If API_SECRET_KEY is missing outside development.
    """
    settings.validate_required()

    app = FastAPI(
        title="Signal Relay",
        description="Authenticated webhook relay for trading signals",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.include_router(webhook_router)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("fastapi_application_created", version=__version__)

    return app


# Create the application
app = create_app()


if __name__ == "__main__":
    """
    PURPOSE: Run the FastAPI application with Uvicorn.

    Usage:
        python -m signal_relay.main
        OR
        uvicorn signal_relay.main:app --host 0.0.0.0 --port 8000
    """
    import uvicorn

    uvicorn.run(
        "signal_relay.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
