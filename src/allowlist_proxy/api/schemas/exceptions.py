"""
Error response formatting and status mapping for API error handling.
"""

from typing import Any

from allowlist_proxy.core.exceptions import (
    AllowlistProxyError,
    AuthorizationError,
    ConfigurationError,
    DuplicateStateError,
    InitializationError,
    InvalidTransitionError,
    MissingStateError,
)

# Most specific first
_STATUS_BY_ERROR: tuple[tuple[type[AllowlistProxyError], int], ...] = (
    (AuthorizationError, 403),
    (MissingStateError, 404),
    (DuplicateStateError, 409),
    (InvalidTransitionError, 409),
    (InitializationError, 409),
    (ConfigurationError, 500),
)


def status_for_error(error: AllowlistProxyError) -> int:
    """HTTP status code for a domain error."""
    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            return status_code
    return 400


def error_body(error_type: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Uniform error payload.

    ``type`` is the exception class name for domain errors, so clients can
    rebuild the same exception on their side.
    """
    return {"error": {"type": error_type, "message": message, "details": details or {}}}
