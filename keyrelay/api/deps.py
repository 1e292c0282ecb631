"""
API Dependency Injection Module

Provides the dependencies used by the proxy route.
"""

from typing import Annotated, Awaitable, Callable

from fastapi import Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.responses import Response

from keyrelay.services import ProxyService

# Request handler the router delegates a whole request to
Delegate = Callable[[Request], Awaitable[Response]]


def get_proxy_service(request: Request) -> ProxyService:
    """Get the proxy service created by the application lifespan"""
    return request.app.state.proxy_service


def _not_configured(name: str) -> Delegate:
    async def handler(request: Request) -> Response:
        return PlainTextResponse(f"{name} handler is not configured", status_code=501)

    return handler


_openai_not_configured = _not_configured("OpenAI-compatible")
_verify_not_configured = _not_configured("Key verification")


def get_openai_delegate() -> Delegate:
    """
    Handler for OpenAI-shaped paths (/chat/completions, /embeddings, ...)

    Override through ``app.dependency_overrides`` to install a real implementation.
    """
    return _openai_not_configured


def get_verify_delegate() -> Delegate:
    """
    Handler for ``POST /verify``

    Override through ``app.dependency_overrides`` to install a real implementation.
    """
    return _verify_not_configured


ProxyServiceDep = Annotated[ProxyService, Depends(get_proxy_service)]
OpenAIDelegateDep = Annotated[Delegate, Depends(get_openai_delegate)]
VerifyDelegateDep = Annotated[Delegate, Depends(get_verify_delegate)]
