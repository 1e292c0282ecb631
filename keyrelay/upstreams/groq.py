"""
Groq Upstream

Forwards "/groq/..." requests to the Groq OpenAI-compatible API.
"""

from typing import Optional

import httpx
from starlette.requests import Request

from keyrelay.common.proxy_headers import CORS_HEADERS, HeaderSource, exclude_headers
from keyrelay.upstreams.base import RequestContent, Upstream

# Inbound headers never copied to Groq (lowercase)
GROQ_EXCLUDED_HEADERS = frozenset(
    {
        "x-groq-api-key",
        "authorization",
        "host",
        "origin",
        "referer",
        # framing and encoding are renegotiated by the outbound client
        "content-length",
        "transfer-encoding",
        "connection",
        "keep-alive",
        "accept-encoding",
    }
)


class GroqUpstream(Upstream):
    """
    Groq upstream

    - the route prefix is stripped from the path
    - all other inbound headers are forwarded, minus credentials and browser context
    - the body is buffered before dispatch
    """

    name = "Groq"
    key_header = "x-groq-api-key"
    requires_key = True
    response_headers = CORS_HEADERS

    def __init__(self, base_url: str, route_prefix: str = "/groq"):
        super().__init__(base_url)
        self.route_prefix = route_prefix

    def build_url(self, path: str, query: str) -> str:
        suffix = path[len(self.route_prefix):] if path.startswith(self.route_prefix) else path
        return self._with_query(f"{self.base_url}{suffix}", query)

    def build_headers(self, headers: HeaderSource, api_key: Optional[str]) -> httpx.Headers:
        new_headers = exclude_headers(headers, GROQ_EXCLUDED_HEADERS)
        if api_key:
            new_headers["Authorization"] = f"Bearer {api_key}"
        new_headers["Content-Type"] = "application/json"
        return new_headers

    async def read_body(self, request: Request) -> Optional[RequestContent]:
        body = await request.body()
        # An empty buffer goes out as no body at all
        return body or None
