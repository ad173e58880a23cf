"""
Pydantic request schemas for API endpoints.

All incoming API requests are validated against these schemas.
"""

from pydantic import BaseModel, Field, field_validator


def _strip_nonempty(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class AddRegistryRequest(BaseModel):
    """Request to register a hosted source with the proxy."""

    label: str = Field(
        ...,
        max_length=256,
        description="Human-readable label (not required to be unique)",
        examples=["Token X"],
    )
    source: str = Field(
        ...,
        description="Address of a hosted allowlist source",
        examples=["0x5FbDB2315678afecb367f032d93F642f64180aa3"],
    )

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        return _strip_nonempty(v)

    model_config = {"extra": "forbid"}


class IdentityRequest(BaseModel):
    """Request carrying a single identity (blacklist or allowlist mutation)."""

    identity: str = Field(
        ...,
        max_length=256,
        description="Identity to act on",
        examples=["0x0000000000000000000000000000000000000000"],
    )

    @field_validator("identity")
    @classmethod
    def validate_identity(cls, v: str) -> str:
        return _strip_nonempty(v)

    model_config = {"extra": "forbid"}


class CreateSourceRequest(BaseModel):
    """Request to host a new allowlist source."""

    address: str | None = Field(
        default=None,
        max_length=128,
        description="Address to use (generated if omitted)",
    )
    allowlist: list[str] = Field(
        default_factory=list,
        description="Identities to allow right away",
    )

    model_config = {"extra": "forbid"}


class TransferOwnershipRequest(BaseModel):
    """Request to hand the owner capability to another principal."""

    new_owner: str = Field(..., max_length=256, description="Principal to become owner")

    @field_validator("new_owner")
    @classmethod
    def validate_new_owner(cls, v: str) -> str:
        return _strip_nonempty(v)

    model_config = {"extra": "forbid"}
