"""
Allowlist Proxy API Module.

REST API exposing the proxy's registry, blacklist and decision operations.
"""

from allowlist_proxy.api.app import create_app

__all__ = ["create_app"]
