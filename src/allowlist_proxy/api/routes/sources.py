"""
Hosted allowlist source endpoints.

Each source is an independent registry with its own owner: the principal
that created it. The proxy never calls these endpoints; it only queries the
sources it has registered.
"""

from fastapi import APIRouter, Depends, status

from allowlist_proxy.api.dependencies import get_caller, get_catalog
from allowlist_proxy.api.schemas.requests import CreateSourceRequest, IdentityRequest
from allowlist_proxy.api.schemas.responses import (
    AllowlistStatusResponse,
    OperationResponse,
    SourceListResponse,
    SourceResponse,
)
from allowlist_proxy.registry.allowlist import AllowlistRegistry
from allowlist_proxy.registry.catalog import SourceCatalog

router = APIRouter()


def _to_response(source: AllowlistRegistry) -> SourceResponse:
    return SourceResponse(
        address=source.address,
        owner=source.owner,
        size=len(source.members()),
    )


@router.get("", response_model=SourceListResponse)
async def list_sources(catalog: SourceCatalog = Depends(get_catalog)) -> SourceListResponse:
    """List hosted sources."""
    sources = [_to_response(source) for source in catalog.list()]
    return SourceListResponse(sources=sources, total=len(sources))


@router.post("", response_model=SourceResponse, status_code=status.HTTP_201_CREATED)
async def create_source(
    request: CreateSourceRequest,
    catalog: SourceCatalog = Depends(get_catalog),
    caller: str = Depends(get_caller),
) -> SourceResponse:
    """Host a new source owned by the caller, optionally pre-filled."""
    source = catalog.create(owner=caller, address=request.address)
    for identity in request.allowlist:
        source.add_allowlist(identity, caller=caller)
    return _to_response(source)


@router.get("/{address}", response_model=SourceResponse)
async def get_source(address: str, catalog: SourceCatalog = Depends(get_catalog)) -> SourceResponse:
    return _to_response(catalog.get(address))


@router.get("/{address}/allowlist/{identity}", response_model=AllowlistStatusResponse)
async def source_is_allowlist(
    address: str,
    identity: str,
    catalog: SourceCatalog = Depends(get_catalog),
) -> AllowlistStatusResponse:
    """Whether this one source allows the identity."""
    source = catalog.get(address)
    return AllowlistStatusResponse(identity=identity, allowed=source.is_allowlist(identity))


@router.post(
    "/{address}/allowlist",
    response_model=OperationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def source_add_allowlist(
    address: str,
    request: IdentityRequest,
    catalog: SourceCatalog = Depends(get_catalog),
    caller: str = Depends(get_caller),
) -> OperationResponse:
    """Allow an identity in one source (source owner only)."""
    catalog.get(address).add_allowlist(request.identity, caller=caller)
    return OperationResponse(operation="add_allowlist", target=request.identity)


@router.delete("/{address}/allowlist/{identity}", response_model=OperationResponse)
async def source_remove_allowlist(
    address: str,
    identity: str,
    catalog: SourceCatalog = Depends(get_catalog),
    caller: str = Depends(get_caller),
) -> OperationResponse:
    """Stop allowing an identity in one source (source owner only)."""
    catalog.get(address).remove_allowlist(identity, caller=caller)
    return OperationResponse(operation="remove_allowlist", target=identity)
