"""
Upstream Base Class

Defines how an inbound request is turned into a request against one upstream API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional, Union

import httpx
from starlette.requests import Request

from keyrelay.common.proxy_headers import HeaderSource

RequestContent = Union[bytes, AsyncIterator[bytes]]


@dataclass
class UpstreamRequest:
    """
    Outbound Request Data Class

    Everything needed to issue one upstream call.
    """

    # HTTP method, identical to the inbound one
    method: str
    # Full target URL including the query string
    url: str
    # Outbound headers
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    # Buffered bytes, a live byte stream, or None for no body
    content: Optional[RequestContent] = None


class Upstream(ABC):
    """
    Upstream API Abstract Base Class

    Subclasses decide the target URL, which inbound headers survive, and whether the body is
    buffered or streamed through.
    """

    # Display name used in logs and error messages
    name: str = ""
    # Dedicated header the caller puts its key list in
    key_header: str = ""
    # Whether a request without any resolvable key is rejected with 401
    requires_key: bool = False
    # Headers set on every relayed response in addition to the common ones
    response_headers: dict[str, str] = {}

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    @abstractmethod
    def build_url(self, path: str, query: str) -> str:
        """
        Build the target URL

        Args:
            path: Inbound path
            query: Inbound query string without the leading "?"
        """

    @abstractmethod
    def build_headers(self, headers: HeaderSource, api_key: Optional[str]) -> httpx.Headers:
        """Build outbound headers from the inbound ones and the selected key."""

    @abstractmethod
    async def read_body(self, request: Request) -> Optional[RequestContent]:
        """Return the outbound body for ``request``."""

    def build_request(
        self,
        method: str,
        path: str,
        query: str,
        headers: HeaderSource,
        api_key: Optional[str],
        content: Optional[RequestContent] = None,
    ) -> UpstreamRequest:
        """
        Assemble the outbound request

        Returns:
            UpstreamRequest: Request ready to be dispatched
        """
        return UpstreamRequest(
            method=method,
            url=self.build_url(path, query),
            headers=self.build_headers(headers, api_key),
            content=content,
        )

    @staticmethod
    def _with_query(url: str, query: str) -> str:
        return f"{url}?{query}" if query else url
