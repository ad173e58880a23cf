"""
Middleware for the Allowlist Proxy API.
"""

from allowlist_proxy.api.middleware.auth import (
    AuthMiddleware,
    hash_api_key,
)
from allowlist_proxy.api.middleware.logging import RequestLoggingMiddleware

__all__ = [
    "AuthMiddleware",
    "RequestLoggingMiddleware",
    "hash_api_key",
]
