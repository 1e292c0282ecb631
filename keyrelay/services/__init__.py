"""
Service Layer Module Initialization
"""

from keyrelay.services.credentials import KeySelector
from keyrelay.services.proxy_service import ProxyService
from keyrelay.services.router import Branch, classify

__all__ = [
    "KeySelector",
    "ProxyService",
    "Branch",
    "classify",
]
