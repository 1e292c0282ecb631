"""
Proxy header utilities.

Inbound headers arrive as a Starlette ``Headers`` multimap and upstream responses as ``httpx.Headers``.
Both match names case-insensitively while keeping the original casing and every repeated value. All
filtering here works on the raw (name, value) byte pairs, since header values are not guaranteed to
be ASCII and either side may use latin-1 or UTF-8.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Union

import httpx
from starlette.datastructures import Headers

HeaderSource = Union[
    httpx.Headers, Headers, Mapping[str, str], Iterable[tuple[Union[str, bytes], Union[str, bytes]]]
]


# Transport artifacts of the upstream hop; the relay re-frames and decodes the body.
RELAY_DROP_HEADERS = frozenset(
    {
        "transfer-encoding",
        "connection",
        "keep-alive",
        "content-encoding",
    }
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, x-goog-api-key, x-groq-api-key",
}


def _as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return value.encode("utf-8")


def raw_header_pairs(headers: HeaderSource | None) -> list[tuple[bytes, bytes]]:
    """
    Return every (name, value) pair as bytes, keeping repeated names as separate entries

    Both multimaps expose the bytes they were built from, so values that are not ASCII pass
    through untouched.
    """
    if headers is None:
        return []
    if isinstance(headers, (httpx.Headers, Headers)):
        return list(headers.raw)
    items = headers.items() if isinstance(headers, Mapping) else headers
    return [(_as_bytes(key), _as_bytes(value)) for key, value in items]


def get_joined(headers: HeaderSource | None, name: str) -> str | None:
    """
    Look up a header case-insensitively

    Repeated header lines are joined with ", ", the same way a single comma-joined line reads.

    Returns:
        str | None: Joined value decoded as latin-1, or None if the header is absent
    """
    lowered = name.lower().encode("latin-1")
    values = [value for key, value in raw_header_pairs(headers) if key.lower() == lowered]
    if not values:
        return None
    return b", ".join(values).decode("latin-1")


def exclude_headers(headers: HeaderSource | None, excluded: Iterable[str]) -> httpx.Headers:
    """
    Copy headers, dropping the excluded names (case-insensitive)

    Applying the same exclusion to the result is a no-op.
    """
    drop = {name.lower().encode("latin-1") for name in excluded}
    return httpx.Headers(
        [(key, value) for key, value in raw_header_pairs(headers) if key.lower() not in drop]
    )


def relay_response_headers(
    upstream_headers: HeaderSource | None,
    extra_headers: Mapping[str, str] | None = None,
) -> httpx.Headers:
    """
    Normalize upstream response headers for the downstream caller

    Removes transport headers, sets ``Referrer-Policy: no-referrer`` and then applies ``extra_headers``.
    ``Content-Length`` is removed as well when the upstream body was content-encoded, because the
    relayed body is the decoded one.
    """
    pairs = raw_header_pairs(upstream_headers)
    encoded = any(key.lower() == b"content-encoding" for key, _ in pairs)

    drop = set(RELAY_DROP_HEADERS)
    if encoded:
        drop.add("content-length")

    relayed = exclude_headers(pairs, drop)
    relayed["Referrer-Policy"] = "no-referrer"
    if extra_headers:
        for key, value in extra_headers.items():
            relayed[key] = value
    return relayed


def to_starlette_headers(headers: httpx.Headers) -> Headers:
    """Convert to a Starlette multimap so responses keep repeated header lines and their exact bytes."""
    return Headers(raw=[(key.lower(), value) for key, value in headers.raw])
