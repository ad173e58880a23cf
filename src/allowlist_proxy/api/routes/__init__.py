"""
API route handlers.
"""

from allowlist_proxy.api.routes import blacklist, health, proxy, registries, sources

__all__ = [
    "blacklist",
    "health",
    "proxy",
    "registries",
    "sources",
]
