"""
Audit trail for administrative proxy operations.
"""

__all__ = [
    "AuditEvent",
    "AuditEventType",
    "AuditLevel",
    "AuditLogger",
    "AuditResult",
    "WriteResult",
]

from allowlist_proxy.audit.logger import AuditLogger, WriteResult
from allowlist_proxy.audit.models import AuditEvent, AuditEventType, AuditLevel, AuditResult
