"""Package version."""

from allowlist_proxy import __version__

__all__ = ["__version__"]
