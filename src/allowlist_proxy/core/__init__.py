"""
Allowlist Proxy Core Module.

Provides foundational types and the exception hierarchy.
"""

__all__ = [
    "AllowlistSource",
    "ProxySnapshot",
    "RegistryEntry",
    "RegistryInfo",
    "RegistryState",
    # Exceptions
    "AllowlistProxyError",
    "AuthorizationError",
    "StateError",
    "DuplicateStateError",
    "MissingStateError",
    "InvalidTransitionError",
    "ExistRegistryError",
    "AccountBlacklistedError",
    "NotExistRegistryError",
    "AccountNotBlacklistedError",
    "PausedRegistryError",
    "UnpausedRegistryError",
    "InitializationError",
    "SourceNotFoundError",
    "ConfigurationError",
    "ServiceError",
]

from allowlist_proxy.core.exceptions import (
    AccountBlacklistedError,
    AccountNotBlacklistedError,
    AllowlistProxyError,
    AuthorizationError,
    ConfigurationError,
    DuplicateStateError,
    ExistRegistryError,
    InitializationError,
    InvalidTransitionError,
    MissingStateError,
    NotExistRegistryError,
    PausedRegistryError,
    ServiceError,
    SourceNotFoundError,
    StateError,
    UnpausedRegistryError,
)
from allowlist_proxy.core.models import (
    AllowlistSource,
    ProxySnapshot,
    RegistryEntry,
    RegistryInfo,
    RegistryState,
)
