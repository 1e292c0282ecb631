"""
Proxy Header Utilities Unit Tests
"""

import httpx
from starlette.datastructures import Headers

from keyrelay.common.proxy_headers import (
    CORS_HEADERS,
    exclude_headers,
    get_joined,
    raw_header_pairs,
    relay_response_headers,
    to_starlette_headers,
)
from keyrelay.upstreams.groq import GROQ_EXCLUDED_HEADERS


class TestRawHeaderPairs:
    def test_httpx_headers_keep_repeated_values(self):
        headers = httpx.Headers([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])
        assert raw_header_pairs(headers) == [(b"Set-Cookie", b"a=1"), (b"Set-Cookie", b"b=2")]

    def test_starlette_headers_keep_repeated_values(self):
        headers = Headers(raw=[(b"x-a", b"1"), (b"x-a", b"2")])
        assert raw_header_pairs(headers) == [(b"x-a", b"1"), (b"x-a", b"2")]

    def test_non_ascii_bytes_are_untouched(self):
        headers = Headers(raw=[(b"x-title", "café".encode("latin-1"))])
        assert raw_header_pairs(headers) == [(b"x-title", b"caf\xe9")]

    def test_str_pairs_are_encoded(self):
        assert raw_header_pairs({"X-Note": "café", "X-File": "报告"}) == [
            (b"X-Note", b"caf\xe9"),
            (b"X-File", "报告".encode("utf-8")),
        ]

    def test_none(self):
        assert raw_header_pairs(None) == []


class TestGetJoined:
    def test_case_insensitive_lookup(self):
        assert get_joined({"Content-Type": "text/plain"}, "content-type") == "text/plain"

    def test_missing_header(self):
        assert get_joined({"a": "b"}, "content-type") is None

    def test_repeated_lines_are_comma_joined(self):
        headers = [("X-Goog-Api-Key", "A"), ("x-goog-api-key", "B")]
        assert get_joined(headers, "X-GOOG-API-KEY") == "A, B"

    def test_value_is_decoded_as_latin1(self):
        headers = Headers(raw=[(b"x-goog-api-key", b"k\xe9y")])
        assert get_joined(headers, "x-goog-api-key") == "k\u00e9y"


class TestExcludeHeaders:
    def test_excluded_names_match_case_insensitively(self):
        inbound = {
            "Host": "proxy.example",
            "X-Groq-Api-Key": "k1,k2",
            "AUTHORIZATION": "Bearer k3",
            "Origin": "https://site.example",
            "Referer": "https://site.example/page",
            "User-Agent": "ua",
            "X-Request-Id": "abc",
        }
        result = exclude_headers(inbound, GROQ_EXCLUDED_HEADERS)
        assert dict(result) == {"user-agent": "ua", "x-request-id": "abc"}

    def test_original_casing_is_preserved(self):
        result = exclude_headers({"X-Request-Id": "abc"}, {"host"})
        assert result.raw == [(b"X-Request-Id", b"abc")]

    def test_exclusion_is_idempotent(self):
        inbound = httpx.Headers(
            [
                ("host", "h"),
                ("x-groq-api-key", "k"),
                ("Accept", "application/json"),
                ("X-Trace", "1"),
                ("X-Trace", "2"),
            ]
        )
        once = exclude_headers(inbound, GROQ_EXCLUDED_HEADERS)
        twice = exclude_headers(once, GROQ_EXCLUDED_HEADERS)
        assert twice.multi_items() == once.multi_items()
        assert not any(key.lower() in GROQ_EXCLUDED_HEADERS for key, _ in twice.multi_items())

    def test_non_ascii_values_are_copied_as_bytes(self):
        inbound = Headers(
            raw=[
                (b"host", b"proxy.example"),
                (b"x-title", "café".encode("latin-1")),
                (b"x-file", "报告".encode("utf-8")),
            ]
        )
        result = exclude_headers(inbound, GROQ_EXCLUDED_HEADERS)
        assert result.raw == [(b"x-title", b"caf\xe9"), (b"x-file", "报告".encode("utf-8"))]


class TestRelayResponseHeaders:
    def test_transport_headers_are_removed(self):
        upstream = httpx.Headers(
            {
                "Content-Type": "application/json",
                "Transfer-Encoding": "chunked",
                "Connection": "keep-alive",
                "Keep-Alive": "timeout=5",
                "X-Request-Id": "req-1",
            }
        )
        relayed = relay_response_headers(upstream)
        assert "transfer-encoding" not in relayed
        assert "connection" not in relayed
        assert "keep-alive" not in relayed
        assert relayed["content-type"] == "application/json"
        assert relayed["x-request-id"] == "req-1"

    def test_referrer_policy_is_always_set(self):
        relayed = relay_response_headers({"Referrer-Policy": "unsafe-url"})
        assert relayed.get_list("referrer-policy") == ["no-referrer"]

    def test_content_length_kept_for_identity_body(self):
        relayed = relay_response_headers({"Content-Length": "12"})
        assert relayed["content-length"] == "12"

    def test_content_length_dropped_with_content_encoding(self):
        relayed = relay_response_headers({"Content-Length": "12", "Content-Encoding": "gzip"})
        assert "content-encoding" not in relayed
        assert "content-length" not in relayed

    def test_extra_headers_are_applied(self):
        relayed = relay_response_headers({"Access-Control-Allow-Origin": "https://x"}, CORS_HEADERS)
        assert relayed.get_list("access-control-allow-origin") == ["*"]
        assert relayed["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS"

    def test_repeated_headers_survive(self):
        upstream = httpx.Headers([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])
        assert relay_response_headers(upstream).get_list("set-cookie") == ["a=1", "b=2"]

    def test_non_ascii_values_are_relayed_as_bytes(self):
        disposition = 'attachment; filename="报告.txt"'.encode("utf-8")
        upstream = httpx.Headers(
            [(b"Content-Disposition", disposition), (b"X-Note", "café".encode("latin-1"))]
        )
        relayed = relay_response_headers(upstream, CORS_HEADERS)
        raw = dict(relayed.raw)
        assert raw[b"Content-Disposition"] == disposition
        assert raw[b"X-Note"] == b"caf\xe9"
        assert raw[b"Access-Control-Allow-Origin"] == b"*"

    def test_none(self):
        assert dict(relay_response_headers(None)) == {"referrer-policy": "no-referrer"}


def test_to_starlette_headers_keeps_repeated_lines():
    converted = to_starlette_headers(httpx.Headers([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")]))
    assert converted.getlist("set-cookie") == ["a=1", "b=2"]


def test_to_starlette_headers_keeps_exact_bytes():
    disposition = 'attachment; filename="报告.txt"'.encode("utf-8")
    converted = to_starlette_headers(httpx.Headers([(b"Content-Disposition", disposition)]))
    assert converted.raw == [(b"content-disposition", disposition)]
