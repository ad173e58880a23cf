"""
Allowlist Proxy Exception Hierarchy.

Defines all custom exceptions raised by the proxy, its registries and the
outer surfaces. Every failure aborts only the invoking operation and leaves
state exactly as it was before the call.
"""

from typing import Any


class AllowlistProxyError(Exception):
    """
    Root of the proxy error tree.

    ``details`` carries the structured context (subject, operation, caller)
    that the HTTP layer sends back to clients.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"

    def to_dict(self) -> dict[str, Any]:
        """Wire form, the inverse of ``error_from_dict``."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class AuthorizationError(AllowlistProxyError):
    """
    Raised when the caller does not hold the owner capability.

    The check runs before any state is read or written, so a
    rejected call never has a partial effect.
    """

    def __init__(
        self,
        message: str = "Caller is not the owner",
        *,
        caller: str | None = None,
        operation: str | None = None,
    ):
        details: dict[str, Any] = {}
        if caller is not None:
            details["caller"] = caller
        if operation:
            details["operation"] = operation
        super().__init__(message, details=details)
        self.caller = caller
        self.operation = operation


class StateError(AllowlistProxyError):
    """
    Errors caused by the current state of the directory or blacklist.

    Raised when:
    - An entity that already exists is created again
    - A missing entity is referenced
    - A registry is asked for an illegal pause/unpause transition
    """

    def __init__(
        self,
        message: str,
        *,
        subject: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a StateError.

        Args:
            message: Human-readable error message
            subject: Registry source or identity involved
            operation: Operation being performed
            details: Optional structured data for debugging
        """
        details = details or {}
        if subject is not None:
            details["subject"] = subject
        if operation:
            details["operation"] = operation

        super().__init__(message, details=details)
        self.subject = subject
        self.operation = operation


class DuplicateStateError(StateError):
    """Raised when attempting to create an entity that already exists."""


class MissingStateError(StateError):
    """Raised when a referenced entity does not exist."""


class InvalidTransitionError(StateError):
    """Raised when a state transition is not legal from the current state."""


class ExistRegistryError(DuplicateStateError):
    """Raised when a registry source is already in the directory."""

    def __init__(self, message: str = "Registry already exists", *, subject: str | None = None):
        super().__init__(message, subject=subject, operation="add_registry")


class AccountBlacklistedError(DuplicateStateError):
    """Raised when an identity is already blacklisted."""

    def __init__(self, message: str = "Account already blacklisted", *, subject: str | None = None):
        super().__init__(message, subject=subject, operation="add_blacklist")


class NotExistRegistryError(MissingStateError):
    """Raised when a registry source is not in the directory."""

    def __init__(
        self,
        message: str = "Registry does not exist",
        *,
        subject: str | None = None,
        operation: str | None = None,
    ):
        super().__init__(message, subject=subject, operation=operation)


class AccountNotBlacklistedError(MissingStateError):
    """Raised when removing an identity that is not blacklisted."""

    def __init__(self, message: str = "Account is not blacklisted", *, subject: str | None = None):
        super().__init__(message, subject=subject, operation="remove_blacklist")


class PausedRegistryError(InvalidTransitionError):
    """Raised when pausing a registry that is already paused."""

    def __init__(self, message: str = "Registry is already paused", *, subject: str | None = None):
        super().__init__(message, subject=subject, operation="pause_registry")


class UnpausedRegistryError(InvalidTransitionError):
    """Raised when unpausing a registry that is not paused."""

    def __init__(self, message: str = "Registry is not paused", *, subject: str | None = None):
        super().__init__(message, subject=subject, operation="unpause_registry")


class InitializationError(AllowlistProxyError):
    """Raised when a proxy that is already initialized is initialized again."""

    def __init__(self, message: str = "Proxy is already initialized", *, name: str | None = None):
        details = {"name": name} if name else {}
        super().__init__(message, details=details)
        self.name = name


class SourceNotFoundError(MissingStateError):
    """Raised when an address does not resolve to a hosted allowlist source."""

    def __init__(self, message: str = "Allowlist source not found", *, subject: str | None = None):
        super().__init__(message, subject=subject, operation="resolve_source")


class ConfigurationError(AllowlistProxyError):
    """
    Errors in configuration loading or validation.

    Raised when:
    - Required environment variables are malformed
    - Configuration values are out of range
    """

    def __init__(
        self,
        message: str,
        *,
        env_var: str | None = None,
        value: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a ConfigurationError.

        Args:
            message: Human-readable error message
            env_var: Environment variable name if applicable
            value: Offending value if applicable
            details: Optional structured data for debugging
        """
        details = details or {}
        if env_var:
            details["env_var"] = env_var
        if value is not None:
            details["value"] = value

        super().__init__(message, details=details)
        self.env_var = env_var
        self.value = value


class ServiceError(AllowlistProxyError):
    """
    Raised by the client when the service cannot be reached or answers with
    an error that is not a domain error (authentication, validation).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        if url:
            details["url"] = url
        super().__init__(message, details=details)
        self.status_code = status_code
        self.url = url


# Error type name -> class, used to rebuild errors received over the wire
ERROR_TYPES: dict[str, type[AllowlistProxyError]] = {
    cls.__name__: cls
    for cls in (
        AllowlistProxyError,
        AuthorizationError,
        StateError,
        DuplicateStateError,
        MissingStateError,
        InvalidTransitionError,
        ExistRegistryError,
        AccountBlacklistedError,
        NotExistRegistryError,
        AccountNotBlacklistedError,
        PausedRegistryError,
        UnpausedRegistryError,
        InitializationError,
        SourceNotFoundError,
        ConfigurationError,
        ServiceError,
    )
}


def format_exception(error: Exception) -> str:
    """
    Format an exception for user-friendly display.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, AllowlistProxyError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"


def error_from_dict(payload: dict[str, Any]) -> AllowlistProxyError:
    """
    Rebuild an exception from its ``to_dict`` form.

    Unknown error types fall back to the base class. The constructor of the
    concrete class is bypassed so that message and details survive as sent.
    """
    cls = ERROR_TYPES.get(payload.get("error_type", ""), AllowlistProxyError)
    error = cls.__new__(cls)
    details = dict(payload.get("details") or {})
    AllowlistProxyError.__init__(error, payload.get("message", ""), details=details)
    for attr in ("subject", "operation", "caller", "name", "env_var", "value", "status_code", "url"):
        setattr(error, attr, details.get(attr))
    return error
