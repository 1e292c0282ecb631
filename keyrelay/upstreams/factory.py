"""
Upstream Factory Module

Creates the configured upstream for a routing branch.
"""

from keyrelay.config import get_settings
from keyrelay.upstreams.base import Upstream
from keyrelay.upstreams.gemini import GeminiUpstream
from keyrelay.upstreams.groq import GroqUpstream


# Upstream cache
_upstreams: dict[str, Upstream] = {}


def get_upstream(name: str) -> Upstream:
    """
    Get the upstream with the given name

    Args:
        name: "groq" or "gemini"

    Returns:
        Upstream: Upstream configured from settings

    Raises:
        ValueError: Unknown upstream name
    """
    name = name.lower()

    if name not in _upstreams:
        settings = get_settings()
        if name == "groq":
            _upstreams[name] = GroqUpstream(settings.GROQ_BASE_URL, settings.GROQ_ROUTE_PREFIX)
        elif name == "gemini":
            _upstreams[name] = GeminiUpstream(settings.GEMINI_BASE_URL)
        else:
            raise ValueError(f"Unsupported upstream: {name}")

    return _upstreams[name]
