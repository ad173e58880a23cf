"""
FastAPI Application Setup.

Main application factory for the Allowlist Proxy REST API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from allowlist_proxy.api.middleware.auth import AuthMiddleware
from allowlist_proxy.api.middleware.logging import RequestLoggingMiddleware
from allowlist_proxy.api.routes import blacklist, health, proxy, registries, sources
from allowlist_proxy.api.schemas.exceptions import error_body, status_for_error
from allowlist_proxy.audit.logger import AuditLogger
from allowlist_proxy.config import ProxySettings
from allowlist_proxy.core.exceptions import AllowlistProxyError
from allowlist_proxy.proxy.engine import AllowlistRegistryProxy
from allowlist_proxy.registry.catalog import SourceCatalog
from allowlist_proxy.version import __version__

logger = logging.getLogger(__name__)

PUBLIC_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown."""
    proxy_instance: AllowlistRegistryProxy = app.state.proxy
    logger.info("Allowlist Proxy API starting up...")
    logger.info(f"Version: {__version__}")
    logger.info(f"Serving proxy {proxy_instance.name!r} (owner={proxy_instance.owner})")

    yield

    logger.info("Allowlist Proxy API shutting down...")


def build_proxy(settings: ProxySettings) -> AllowlistRegistryProxy:
    """Create a proxy from settings and initialize it with the configured owner."""
    audit_logger = AuditLogger(settings.audit_dir) if settings.audit_dir else None
    if audit_logger:
        logger.info(f"Audit trail enabled in {audit_logger.audit_dir}")

    proxy_instance = AllowlistRegistryProxy(audit_logger=audit_logger)
    proxy_instance.initialize(settings.proxy_name, caller=settings.owner)
    return proxy_instance


def create_app(
    settings: ProxySettings | None = None,
    *,
    proxy_instance: AllowlistRegistryProxy | None = None,
    catalog: SourceCatalog | None = None,
    title: str = "Allowlist Proxy API",
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Service settings (read from the environment if omitted)
        proxy_instance: Proxy to serve (built from settings if omitted)
        catalog: Hosted sources (empty if omitted)
        title: Application title for OpenAPI docs

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or ProxySettings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=title,
        description="Aggregate allowlist decisions over multiple registries with a blacklist override",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.proxy = proxy_instance if proxy_instance is not None else build_proxy(settings)
    app.state.catalog = catalog if catalog is not None else SourceCatalog()

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        AuthMiddleware,
        require_auth=settings.require_auth,
        public_paths=PUBLIC_PATHS,
        api_keys=settings.api_keys,
        trust_user_id_header=settings.trust_user_id_header,
    )
    if not settings.require_auth:
        logger.warning("Authentication DISABLED (AP_REQUIRE_AUTH=false)")

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(proxy.router, prefix="/api/v1", tags=["Proxy"])
    app.include_router(registries.router, prefix="/api/v1/registries", tags=["Registries"])
    app.include_router(blacklist.router, prefix="/api/v1/blacklist", tags=["Blacklist"])
    app.include_router(sources.router, prefix="/api/v1/sources", tags=["Sources"])

    @app.exception_handler(AllowlistProxyError)
    async def proxy_error_handler(request: Request, exc: AllowlistProxyError) -> JSONResponse:
        """Map domain errors to HTTP responses."""
        return JSONResponse(
            status_code=status_for_error(exc),
            content=error_body(exc.__class__.__name__, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report malformed request bodies as 400."""
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", "Request validation failed", {"errors": errors}),
        )

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, object]:
        """Root endpoint with API information."""
        return {
            "name": "Allowlist Proxy API",
            "version": __version__,
            "proxy": app.state.proxy.name,
            "docs": "/docs",
            "health": "/health",
        }

    return app
