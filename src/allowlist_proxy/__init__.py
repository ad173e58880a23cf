"""
Allowlist Proxy - aggregate access decisions over independent registries.

A central proxy consults a dynamic set of allowlist registries, skips the
paused ones, and applies a process-wide blacklist as the final veto.
"""

__version__ = "0.1.0"

# API module is available but not exported by default
# Import explicitly: from allowlist_proxy.api import create_app

__all__ = []
