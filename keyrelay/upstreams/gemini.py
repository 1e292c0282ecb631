"""
Google Gemini Upstream

Forwards every unmatched request to the Gemini API with the path and query unchanged.
"""

from typing import Optional

import httpx
from starlette.requests import Request

from keyrelay.common.proxy_headers import HeaderSource, get_joined
from keyrelay.upstreams.base import RequestContent, Upstream


class GeminiUpstream(Upstream):
    """Gemini upstream: only the key and content type reach Google, the body is streamed through."""

    name = "Gemini"
    key_header = "x-goog-api-key"

    def build_url(self, path: str, query: str) -> str:
        cleaned_path = path if path.startswith("/") else f"/{path}"
        return self._with_query(f"{self.base_url}{cleaned_path}", query)

    def build_headers(self, headers: HeaderSource, api_key: Optional[str]) -> httpx.Headers:
        # values were decoded as latin-1, encoding them back restores the caller's bytes
        pairs = []
        if api_key:
            pairs.append((b"x-goog-api-key", api_key.encode("latin-1")))
        content_type = get_joined(headers, "content-type")
        if content_type is not None:
            pairs.append((b"Content-Type", content_type.encode("latin-1")))
        return httpx.Headers(pairs)

    async def read_body(self, request: Request) -> Optional[RequestContent]:
        if not _declares_body(request):
            return None
        return request.stream()


def _declares_body(request: Request) -> bool:
    if "transfer-encoding" in request.headers:
        return True
    try:
        return int(request.headers.get("content-length", "0")) > 0
    except ValueError:
        return False
