"""
Credential Selection Module

Resolves the upstream API key for a request from the keys the caller supplied.
"""

import logging
import random
from typing import Optional

from keyrelay.common.proxy_headers import HeaderSource, get_joined
from keyrelay.common.sanitizer import mask_key

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def parse_key_list(raw: Optional[str]) -> list[str]:
    """
    Split a comma-separated key list

    Args:
        raw: Header value such as "AAA, BBB,,CCC"

    Returns:
        list[str]: Trimmed, non-empty keys in their original order
    """
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an ``Authorization: Bearer <token>`` value

    The prefix match is case-sensitive.

    Returns:
        Optional[str]: Trimmed token, or None if absent or empty
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class KeySelector:
    """
    Random Key Selector

    Picks one of the caller-supplied keys uniformly at random. Each call is independent; the
    random source is injectable so tests can pin it.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def candidates(self, headers: HeaderSource, key_header: str) -> list[str]:
        """
        Collect candidate keys

        Keys from ``key_header`` come first, followed by the bearer token from ``Authorization``.
        Duplicates are kept.
        """
        keys = parse_key_list(get_joined(headers, key_header))
        bearer = extract_bearer_token(get_joined(headers, "authorization"))
        if bearer:
            keys.append(bearer)
        return keys

    def select(self, headers: HeaderSource, key_header: str) -> Optional[str]:
        """
        Select one key

        Args:
            headers: Inbound request headers
            key_header: Dedicated key header name, e.g. "x-groq-api-key"

        Returns:
            Optional[str]: Selected key, or None when the caller supplied no key at all
        """
        keys = self.candidates(headers, key_header)
        if not keys:
            return None
        selected = self._rng.choice(keys)
        logger.debug(
            "Selected key %s from %d candidate(s) for %s",
            mask_key(selected),
            len(keys),
            key_header,
        )
        return selected
