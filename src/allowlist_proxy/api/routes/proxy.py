"""
Proxy descriptor and decision endpoints.
"""

from fastapi import APIRouter, Depends

from allowlist_proxy.api.dependencies import get_caller, get_proxy
from allowlist_proxy.api.schemas.requests import TransferOwnershipRequest
from allowlist_proxy.api.schemas.responses import (
    AllowlistStatusResponse,
    OperationResponse,
    ProxyInfoResponse,
)
from allowlist_proxy.proxy.engine import AllowlistRegistryProxy

router = APIRouter()


@router.get("/proxy", response_model=ProxyInfoResponse)
async def get_proxy_info(
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
) -> ProxyInfoResponse:
    """Name, version, owner and registry count of the proxy."""
    return ProxyInfoResponse(
        name=proxy.name,
        version=proxy.version,
        owner=proxy.owner,
        total_registry=proxy.total_registry(),
    )


@router.post("/proxy/transfer-ownership", response_model=OperationResponse)
async def transfer_ownership(
    request: TransferOwnershipRequest,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
    caller: str = Depends(get_caller),
) -> OperationResponse:
    """Hand the owner capability to another principal."""
    proxy.transfer_ownership(request.new_owner, caller=caller)
    return OperationResponse(operation="transfer_ownership", target=request.new_owner)


@router.get("/allowlist/{identity}", response_model=AllowlistStatusResponse)
async def is_allowlist(
    identity: str,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
) -> AllowlistStatusResponse:
    """
    Aggregate allow decision.

    False when the identity is blacklisted; otherwise true iff some active
    registry allows it.
    """
    return AllowlistStatusResponse(identity=identity, allowed=proxy.is_allowlist(identity))
