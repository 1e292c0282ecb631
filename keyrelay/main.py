"""
Key Relay Application Entry Point

FastAPI application main entry, including lifecycle management and router registration.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from keyrelay import __version__
from keyrelay.api import proxy_router
from keyrelay.common.errors import AppError, internal_error_response
from keyrelay.config import get_settings
from keyrelay.logging_config import setup_logging
from keyrelay.services import KeySelector, ProxyService

logger = logging.getLogger(__name__)

# Initialize logging configuration
setup_logging()


def create_http_client() -> httpx.AsyncClient:
    """
    Create the shared upstream HTTP client

    Returns:
        httpx.AsyncClient: Pooled client with the configured timeout and limits
    """
    settings = get_settings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT),
        limits=httpx.Limits(
            max_connections=settings.HTTP_MAX_CONNECTIONS,
            max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS,
        ),
    )


# Application Lifecycle Management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application Lifecycle Management

    Create the shared HTTP client on startup, close it on shutdown.
    """
    # Startup
    app.state.http_client = create_http_client()
    app.state.proxy_service = ProxyService(app.state.http_client, KeySelector())
    logger.info("%s is ready", get_settings().APP_NAME)
    yield
    # Shutdown
    await app.state.http_client.aclose()


settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="Reverse proxy for the Gemini and Groq APIs with random key selection",
    version=__version__,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


# Global Exception Handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render application errors as plain text"""
    return exc.to_response()


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions

    Logs the failing path with the traceback and answers 500 with the error message.
    """
    logger.error("Uncaught exception: %s Path: %s", exc, request.url.path, exc_info=exc)
    return internal_error_response(exc)


# Register Proxy Router (catch-all, so it goes last)
app.include_router(proxy_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "keyrelay.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
