"""
Pydantic response schemas for API endpoints.

All API responses conform to these schemas for consistent output.
"""

from pydantic import BaseModel, Field


class ProxyInfoResponse(BaseModel):
    """Descriptor of the proxy."""

    name: str = Field(..., description="Name set at initialization")
    version: str = Field(..., description="Proxy version")
    owner: str | None = Field(None, description="Current owner principal")
    total_registry: int = Field(..., description="Number of registered sources")


class RegistryInfoResponse(BaseModel):
    """Label and pause status of one registry entry."""

    source: str = Field(..., description="Source address")
    label: str = Field(..., description="Label, empty if not registered")
    paused: bool = Field(..., description="Whether the entry is paused")


class RegistryListResponse(BaseModel):
    """All registered sources."""

    registries: list[str] = Field(default_factory=list, description="Source addresses")
    total: int = Field(..., description="Number of registered sources")


class BlacklistStatusResponse(BaseModel):
    """Blacklist membership of an identity."""

    identity: str
    blacklisted: bool


class AllowlistStatusResponse(BaseModel):
    """Allow decision for an identity."""

    identity: str
    allowed: bool


class OperationResponse(BaseModel):
    """Result of an administrative operation."""

    status: str = Field(default="success")
    operation: str = Field(..., description="Operation performed")
    target: str = Field(..., description="Source address or identity affected")


class SourceResponse(BaseModel):
    """A hosted allowlist source."""

    address: str
    owner: str
    size: int = Field(..., description="Number of allowed identities")


class SourceListResponse(BaseModel):
    """All hosted sources."""

    sources: list[SourceResponse] = Field(default_factory=list)
    total: int


class HealthResponse(BaseModel):
    """Service health."""

    status: str = Field(..., description="Overall status")
    version: str = Field(..., description="Package version")
    initialized: bool = Field(..., description="Whether the proxy is initialized")
    components: dict[str, str] = Field(default_factory=dict)
