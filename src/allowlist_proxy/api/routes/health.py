"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends

from allowlist_proxy.api.dependencies import get_catalog, get_proxy
from allowlist_proxy.api.schemas.responses import HealthResponse
from allowlist_proxy.proxy.engine import AllowlistRegistryProxy
from allowlist_proxy.registry.catalog import SourceCatalog
from allowlist_proxy.version import __version__

router = APIRouter()


@router.get("", response_model=HealthResponse)
@router.get("/", response_model=HealthResponse)
async def health_check(
    proxy: AllowlistRegistryProxy = Depends(get_proxy),
    catalog: SourceCatalog = Depends(get_catalog),
) -> HealthResponse:
    """
    Report service health.

    The service is degraded while the proxy is uninitialized, since every
    administrative call would be rejected.
    """
    snapshot = proxy.snapshot()
    active = sum(1 for entry in snapshot.entries if not entry.paused)
    components = {
        "proxy": "initialized" if proxy.initialized else "uninitialized",
        "registries": f"{len(snapshot.entries)} registered, {active} active",
        "blacklist": f"{len(snapshot.blacklist)} identities",
        "sources": f"{len(catalog)} hosted",
    }
    return HealthResponse(
        status="healthy" if proxy.initialized else "degraded",
        version=__version__,
        initialized=proxy.initialized,
        components=components,
    )
