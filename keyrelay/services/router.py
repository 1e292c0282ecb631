"""
Request Routing Module

Classifies an inbound request into exactly one handling branch.
"""

from enum import Enum


class Branch(str, Enum):
    """Routing outcome"""

    PREFLIGHT = "preflight"
    GROQ = "groq"
    LANDING = "landing"
    VERIFY = "verify"
    OPENAI = "openai"
    GEMINI = "gemini"


LANDING_PATHS = frozenset({"/", "/index.html"})
VERIFY_PATH = "/verify"
OPENAI_SUFFIXES = ("/chat/completions", "/completions", "/embeddings", "/models")


def classify(method: str, path: str, groq_prefix: str = "/groq") -> Branch:
    """
    Classify a request by method and path

    Checked in order: preflight, Groq prefix, landing page, verification, OpenAI-compatible
    suffixes. Anything else is forwarded to Gemini, so no path ever yields 404.

    Args:
        method: HTTP method
        path: Request path
        groq_prefix: Path prefix that selects the Groq upstream

    Returns:
        Branch: Selected branch
    """
    method = method.upper()

    if method == "OPTIONS":
        return Branch.PREFLIGHT
    if path.startswith(groq_prefix):
        return Branch.GROQ
    if path in LANDING_PATHS:
        return Branch.LANDING
    if path == VERIFY_PATH and method == "POST":
        return Branch.VERIFY
    if path.endswith(OPENAI_SUFFIXES):
        return Branch.OPENAI
    return Branch.GEMINI
