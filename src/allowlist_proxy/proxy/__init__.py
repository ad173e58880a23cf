"""
Allowlist Proxy Decision Module.

Composes the registry directory and the blacklist into the aggregate
allow decision.
"""

__all__ = [
    "AllowlistRegistryProxy",
    "Blacklist",
    "PROXY_VERSION",
]

from allowlist_proxy.proxy.blacklist import Blacklist
from allowlist_proxy.proxy.engine import PROXY_VERSION, AllowlistRegistryProxy
