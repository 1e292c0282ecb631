"""Proxy Core Service Module

Forwards one inbound request to an upstream and relays the answer."""

import logging
from typing import AsyncIterator, Mapping, Optional

import httpx
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import StreamingResponse

from keyrelay.common.errors import NoCredentialError
from keyrelay.common.proxy_headers import relay_response_headers, to_starlette_headers
from keyrelay.common.sanitizer import sanitize_headers
from keyrelay.services.credentials import KeySelector
from keyrelay.upstreams.base import Upstream, UpstreamRequest

logger = logging.getLogger(__name__)


def request_path(request: Request) -> str:
    """
    Path of the inbound request as the client sent it

    Prefers the undecoded ``raw_path`` so percent-escapes reach the upstream unchanged.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1")
    return request.url.path


class ProxyService:
    """
    Proxy Core Service

    Handles one proxy request end to end:
    1. Select a key from the caller's key headers
    2. Read the body (buffered or streamed, depending on the upstream)
    3. Build URL and headers for the upstream
    4. Dispatch through the shared HTTP client
    5. Relay status, normalized headers and the streamed body
    """

    def __init__(self, client: httpx.AsyncClient, selector: Optional[KeySelector] = None):
        """
        Initialize Service

        Args:
            client: Shared HTTP client used for every upstream call
            selector: Key selector (a default one is created if omitted)
        """
        self.client = client
        self.selector = selector or KeySelector()

    async def prepare(self, request: Request, upstream: Upstream) -> UpstreamRequest:
        """
        Build the outbound request for ``upstream``

        Raises:
            NoCredentialError: The upstream requires a key and the caller supplied none
        """
        api_key = self.selector.select(request.headers, upstream.key_header)
        if api_key is None and upstream.requires_key:
            raise NoCredentialError(upstream.name, upstream.key_header)

        content = await upstream.read_body(request)
        return upstream.build_request(
            method=request.method,
            path=request_path(request),
            query=request.url.query,
            headers=request.headers,
            api_key=api_key,
            content=content,
        )

    async def send(self, outbound: UpstreamRequest) -> httpx.Response:
        """
        Dispatch the outbound request

        Only the status line and headers are awaited; the body is left open for streaming.
        """
        upstream_request = self.client.build_request(
            outbound.method,
            outbound.url,
            headers=outbound.headers,
            content=outbound.content,
        )
        return await self.client.send(upstream_request, stream=True)

    async def forward(self, request: Request, upstream: Upstream) -> StreamingResponse:
        """
        Forward ``request`` to ``upstream`` and relay the response

        Args:
            request: Inbound request
            upstream: Target upstream

        Returns:
            StreamingResponse: Relayed upstream response
        """
        outbound = await self.prepare(request, upstream)

        logger.info(
            "[%s Proxy] Forwarding %s to: %s",
            upstream.name,
            outbound.method,
            outbound.url.split("?", 1)[0],
        )
        logger.debug(
            "[%s Proxy] Outbound headers: %s",
            upstream.name,
            sanitize_headers(outbound.headers.multi_items()),
        )

        upstream_response = await self.send(outbound)

        logger.info(
            "[%s Proxy] Upstream responded %s for %s",
            upstream.name,
            upstream_response.status_code,
            request.url.path,
        )
        try:
            return self.relay(upstream_response, upstream.response_headers)
        except BaseException:
            await upstream_response.aclose()
            raise

    @staticmethod
    def relay(
        upstream_response: httpx.Response,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> StreamingResponse:
        """
        Wrap an open upstream response for the downstream caller

        The body is streamed chunk by chunk. The upstream response is closed once streaming stops,
        including when the caller disconnects.
        """
        headers = relay_response_headers(upstream_response.headers, extra_headers)
        return StreamingResponse(
            _iter_body(upstream_response),
            status_code=upstream_response.status_code,
            headers=to_starlette_headers(headers),
            background=BackgroundTask(upstream_response.aclose),
        )


async def _iter_body(upstream_response: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in upstream_response.aiter_bytes():
            yield chunk
    except httpx.HTTPError as e:
        # Headers are already sent; the status can no longer change.
        logger.warning("Upstream stream aborted: path=%s error=%s", upstream_response.url.path, e)
        raise
    finally:
        await upstream_response.aclose()
