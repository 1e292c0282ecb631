"""
Test Configuration Module
"""

import random
from typing import Callable, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from keyrelay.api.deps import get_proxy_service
from keyrelay.main import app
from keyrelay.services import KeySelector, ProxyService


class RecordingUpstream:
    """Mock upstream: records every request and answers with ``handler``"""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"ok": True}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "upstream was never called"
        return self.requests[-1]


@pytest.fixture
def upstream() -> RecordingUpstream:
    return RecordingUpstream()


@pytest_asyncio.fixture
async def proxy_service(upstream):
    """Proxy service talking to the recording upstream, with a seeded key selector"""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    yield ProxyService(http_client, KeySelector(random.Random(1234)))
    await http_client.aclose()


@pytest_asyncio.fixture
async def client(proxy_service):
    """HTTP client bound to the FastAPI app"""
    app.dependency_overrides[get_proxy_service] = lambda: proxy_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


def make_request(
    method: str = "GET",
    path: str = "/",
    headers: Optional[list[tuple[str, str]]] = None,
    body: bytes = b"",
    query: str = "",
) -> Request:
    """Build a Starlette request from a raw ASGI scope"""
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "server": ("test", 80),
        "client": ("127.0.0.1", 50000),
        "root_path": "",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "headers": [
            (key.lower().encode("latin-1"), value.encode("latin-1"))
            for key, value in (headers or [])
        ],
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def request_factory() -> Callable[..., Request]:
    return make_request
