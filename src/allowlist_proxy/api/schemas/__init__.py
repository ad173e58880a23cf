"""
API request and response schemas.
"""

from allowlist_proxy.api.schemas.exceptions import error_body, status_for_error
from allowlist_proxy.api.schemas.requests import (
    AddRegistryRequest,
    CreateSourceRequest,
    IdentityRequest,
    TransferOwnershipRequest,
)
from allowlist_proxy.api.schemas.responses import (
    AllowlistStatusResponse,
    BlacklistStatusResponse,
    HealthResponse,
    OperationResponse,
    ProxyInfoResponse,
    RegistryInfoResponse,
    RegistryListResponse,
    SourceListResponse,
    SourceResponse,
)

__all__ = [
    "error_body",
    "status_for_error",
    "AddRegistryRequest",
    "CreateSourceRequest",
    "IdentityRequest",
    "TransferOwnershipRequest",
    "AllowlistStatusResponse",
    "BlacklistStatusResponse",
    "HealthResponse",
    "OperationResponse",
    "ProxyInfoResponse",
    "RegistryInfoResponse",
    "RegistryListResponse",
    "SourceListResponse",
    "SourceResponse",
]
