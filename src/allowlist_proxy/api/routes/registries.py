"""
Registry directory endpoints.

Endpoints for listing, adding, removing, pausing and unpausing the
registries consulted by the proxy.
"""

from typing import Hashable

from fastapi import APIRouter, Depends, status

from allowlist_proxy.api.dependencies import get_caller, get_catalog, get_proxy
from allowlist_proxy.api.schemas.requests import AddRegistryRequest
from allowlist_proxy.api.schemas.responses import (
    OperationResponse,
    RegistryInfoResponse,
    RegistryListResponse,
)
from allowlist_proxy.audit.models import AuditEventType
from allowlist_proxy.core.exceptions import SourceNotFoundError
from allowlist_proxy.proxy.engine import AllowlistRegistryProxy
from allowlist_proxy.registry.catalog import SourceCatalog
from allowlist_proxy.registry.directory import describe_source

router = APIRouter()


def _lookup(catalog: SourceCatalog, address: str) -> Hashable:
    """
    Source handle for an address.

    Unknown addresses are passed to the proxy as the bare string: it is
    never registered, so the proxy answers with its own authorization and
    existence errors in the usual order.
    """
    return catalog.find(address) or address


@router.get("", response_model=RegistryListResponse)
async def list_registries(
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
) -> RegistryListResponse:
    """List all registered sources. Order is unspecified."""
    snapshot = proxy.snapshot()
    return RegistryListResponse(
        registries=[describe_source(entry.source) for entry in snapshot.entries],
        total=len(snapshot.entries),
    )


@router.get("/{address}", response_model=RegistryInfoResponse)
async def get_registry_info(
    address: str,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
    catalog: SourceCatalog = Depends(get_catalog),
) -> RegistryInfoResponse:
    """
    Label and pause status of a registry.

    An unknown address is not an error: it reports an empty label and
    ``paused=false``.
    """
    info = proxy.get_registry_info(_lookup(catalog, address))
    return RegistryInfoResponse(source=address, label=info.label, paused=info.paused)


@router.post("", response_model=OperationResponse, status_code=status.HTTP_201_CREATED)
async def add_registry(
    request: AddRegistryRequest,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
    catalog: SourceCatalog = Depends(get_catalog),
    caller: str = Depends(get_caller),
) -> OperationResponse:
    """
    Register a hosted source under a label.

    The owner gate comes first, so a non-owner learns nothing about which
    addresses are hosted.

    Raises:
        AuthorizationError: If the caller is not the owner (403)
        SourceNotFoundError: If the address is not a hosted source (404)
        ExistRegistryError: If the source is already registered (409)
    """
    source = catalog.find(request.source)
    if source is None:
        proxy.authorize(AuditEventType.REGISTRY_ADD, caller=caller, target=request.source)
        raise SourceNotFoundError(subject=request.source)
    proxy.add_registry(request.label, source, caller=caller)
    return OperationResponse(operation="add_registry", target=request.source)


@router.delete("/{address}", response_model=OperationResponse)
async def remove_registry(
    address: str,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
    catalog: SourceCatalog = Depends(get_catalog),
    caller: str = Depends(get_caller),
) -> OperationResponse:
    """Remove a registry, paused or not."""
    proxy.remove_registry(_lookup(catalog, address), caller=caller)
    return OperationResponse(operation="remove_registry", target=address)


@router.post("/{address}/pause", response_model=OperationResponse)
async def pause_registry(
    address: str,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
    catalog: SourceCatalog = Depends(get_catalog),
    caller: str = Depends(get_caller),
) -> OperationResponse:
    """Exclude a registry from decisions without removing it."""
    proxy.pause_registry(_lookup(catalog, address), caller=caller)
    return OperationResponse(operation="pause_registry", target=address)


@router.post("/{address}/unpause", response_model=OperationResponse)
async def unpause_registry(
    address: str,
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
    catalog: SourceCatalog = Depends(get_catalog),
    caller: str = Depends(get_caller),
) -> OperationResponse:
    """Put a paused registry back into consideration."""
    proxy.unpause_registry(_lookup(catalog, address), caller=caller)
    return OperationResponse(operation="unpause_registry", target=address)
