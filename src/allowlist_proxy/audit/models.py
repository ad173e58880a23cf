"""
Audit data models for the allowlist proxy.

Defines the types of administrative events recorded in the audit trail.
"""

import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AuditLevel(str, Enum):
    """Audit log severity levels."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEventType(str, Enum):
    """Administrative operations recorded in the audit trail."""

    PROXY_INITIALIZE = "proxy_initialize"
    OWNERSHIP_TRANSFER = "ownership_transfer"

    REGISTRY_ADD = "registry_add"
    REGISTRY_REMOVE = "registry_remove"
    REGISTRY_PAUSE = "registry_pause"
    REGISTRY_UNPAUSE = "registry_unpause"

    BLACKLIST_ADD = "blacklist_add"
    BLACKLIST_REMOVE = "blacklist_remove"


class AuditResult(str, Enum):
    """Outcome of an audited operation."""

    SUCCESS = "success"
    REJECTED = "rejected"
    """Precondition failed (duplicate, missing, illegal transition)."""

    DENIED = "denied"
    """Caller lacks the owner capability."""


def _utc_now() -> str:
    """Return current UTC timestamp as ISO8601 string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class AuditEvent(BaseModel):
    """
    A single audit log entry.

    Immutable record of one administrative call against the proxy.
    """

    event_id: str = Field(default_factory=lambda: f"evt_{uuid.uuid4().hex[:16]}")
    timestamp: str = Field(default_factory=_utc_now)
    event_type: AuditEventType = Field(description="Operation that was attempted")

    actor: str | None = Field(default=None, description="Principal that made the call")
    target: str | None = Field(default=None, description="Registry source or identity affected")

    result: AuditResult = Field(default=AuditResult.SUCCESS, description="Operation result")
    severity: AuditLevel = Field(default=AuditLevel.INFO, description="Log severity level")

    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional event context")
    error_message: str | None = Field(default=None, description="Error details if the call failed")

    model_config = {"frozen": True}

    def to_log_line(self) -> str:
        """Serialize to a single JSONL line."""
        return json.dumps(self.model_dump(mode="json"), sort_keys=True)

    @classmethod
    def from_log_line(cls, line: str) -> "AuditEvent":
        """Parse an event from a JSONL line."""
        return cls.model_validate_json(line)
