"""
Allowlist Proxy Registry Module.

Provides the allow sources consumed by the proxy, the directory that
tracks them, and the catalog that resolves hosted sources by address.
"""

__all__ = [
    "AllowlistRegistry",
    "RegistryDirectory",
    "SourceCatalog",
    "describe_source",
    "generate_address",
]

from allowlist_proxy.registry.allowlist import AllowlistRegistry, generate_address
from allowlist_proxy.registry.catalog import SourceCatalog
from allowlist_proxy.registry.directory import RegistryDirectory, describe_source
