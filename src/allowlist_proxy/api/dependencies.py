"""
Request dependencies shared by the route handlers.
"""

from fastapi import Request

from allowlist_proxy.proxy.engine import AllowlistRegistryProxy
from allowlist_proxy.registry.catalog import SourceCatalog

ANONYMOUS = "anonymous"


def get_proxy(request: Request) -> AllowlistRegistryProxy:
    """The proxy served by this application."""
    return request.app.state.proxy


def get_catalog(request: Request) -> SourceCatalog:
    """The catalog of hosted allowlist sources."""
    return request.app.state.catalog


def get_caller(request: Request) -> str:
    """
    Calling principal.

    Unauthenticated callers get a placeholder principal that can never be
    the owner, so the proxy rejects their mutations with 403.
    """
    return getattr(request.state, "user_id", None) or ANONYMOUS
