"""
Upstream API module initialization
"""

from keyrelay.upstreams.base import Upstream, UpstreamRequest
from keyrelay.upstreams.gemini import GeminiUpstream
from keyrelay.upstreams.groq import GroqUpstream
from keyrelay.upstreams.factory import get_upstream

__all__ = [
    "Upstream",
    "UpstreamRequest",
    "GeminiUpstream",
    "GroqUpstream",
    "get_upstream",
]
