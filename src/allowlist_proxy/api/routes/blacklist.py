"""
Blacklist endpoints.
"""

from fastapi import APIRouter, Depends, status

from allowlist_proxy.api.dependencies import get_caller, get_proxy
from allowlist_proxy.api.schemas.requests import IdentityRequest
from allowlist_proxy.api.schemas.responses import BlacklistStatusResponse, OperationResponse
from allowlist_proxy.proxy.engine import AllowlistRegistryProxy

router = APIRouter()


@router.get("/{identity}", response_model=BlacklistStatusResponse)
async def is_blacklist(
    identity: str,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
) -> BlacklistStatusResponse:
    """Blacklist membership of an identity."""
    return BlacklistStatusResponse(identity=identity, blacklisted=proxy.is_blacklist(identity))


@router.post("", response_model=OperationResponse, status_code=status.HTTP_201_CREATED)
async def add_blacklist(
    request: IdentityRequest,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
    caller: str = Depends(get_caller),
) -> OperationResponse:
    """Deny an identity regardless of any registry."""
    proxy.add_blacklist(request.identity, caller=caller)
    return OperationResponse(operation="add_blacklist", target=request.identity)


@router.delete("/{identity}", response_model=OperationResponse)
async def remove_blacklist(
    identity: str,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
    caller: str = Depends(get_caller),
) -> OperationResponse:
    """Lift the denial of an identity."""
    proxy.remove_blacklist(identity, caller=caller)
    return OperationResponse(operation="remove_blacklist", target=identity)
