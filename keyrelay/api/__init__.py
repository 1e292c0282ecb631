"""
API Module Initialization
"""

from keyrelay.api.proxy import router as proxy_router

__all__ = [
    "proxy_router",
]
