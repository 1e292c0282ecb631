"""
Data Sanitization Module

Masks upstream API keys so that logs never contain them in plain text.
"""

from typing import Any, Iterable


# Header names whose values carry upstream credentials (lowercase)
SENSITIVE_HEADERS = {"authorization", "x-groq-api-key", "x-goog-api-key"}


def mask_key(value: str) -> str:
    """
    Mask an API key or an Authorization header value

    Keeps a prefix and suffix for identification.

    Args:
        value: Original value, e.g., "Bearer gsk_xxxxxxxxxxxx" or "AIzaSyxxxxxxxx"

    Returns:
        str: Masked value

    Examples:
        >>> mask_key("Bearer gsk_1234567890abcdef")
        'Bearer gsk_***...***ef'
        >>> mask_key("AIzaSy0123456789")
        'AIza***...***89'
    """
    if not value:
        return value

    prefix = ""
    token = value
    if value.startswith("Bearer "):
        prefix = "Bearer "
        token = value[7:]

    if len(token) <= 8:
        return f"{prefix}***"

    return f"{prefix}{token[:4]}***...***{token[-2:]}"


def mask_key_list(value: str) -> str:
    """Mask every entry of a comma-separated key list."""
    return ", ".join(mask_key(part.strip()) for part in value.split(","))


def sanitize_headers(headers: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """
    Mask credential headers for logging

    Args:
        headers: (name, value) pairs, e.g. ``httpx.Headers.multi_items()``

    Returns:
        dict: New dictionary with credential values masked
    """
    sanitized: dict[str, Any] = {}
    for key, value in headers:
        lowered = key.lower()
        if lowered in SENSITIVE_HEADERS and isinstance(value, str):
            if lowered == "authorization":
                sanitized[key] = mask_key(value)
            else:
                sanitized[key] = mask_key_list(value)
        else:
            sanitized[key] = value
    return sanitized
