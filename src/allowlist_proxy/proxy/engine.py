"""
Allowlist Registry Proxy - the aggregate allow decision.

Composes the registry directory and the blacklist behind an owner
capability:

- Administrative calls (registry and blacklist mutations) are owner-gated
  and serialized through a single write lock.
- Every successful mutation publishes a new immutable ``ProxySnapshot``.
- Queries read the current snapshot without locking.
"""

import logging
import threading
from typing import Any, Callable, Hashable

from allowlist_proxy.audit.logger import AuditLogger
from allowlist_proxy.audit.models import AuditEvent, AuditEventType, AuditLevel, AuditResult
from allowlist_proxy.core.exceptions import (
    AllowlistProxyError,
    AuthorizationError,
    InitializationError,
)
from allowlist_proxy.core.models import (
    EMPTY_SNAPSHOT,
    ProxySnapshot,
    RegistryInfo,
)
from allowlist_proxy.proxy.blacklist import Blacklist
from allowlist_proxy.registry.directory import RegistryDirectory, describe_source

logger = logging.getLogger(__name__)

PROXY_VERSION = "1.0.0"


class AllowlistRegistryProxy:
    """
    Aggregates allow decisions over a dynamic set of registries.

    ``is_allowlist(x)`` is False when x is blacklisted; otherwise True iff
    some non-paused registry allows x. The proxy holds registry handles only;
    it never mutates a registry's allow-set.

    The proxy has no owner until ``initialize`` is called, so every
    administrative call made before initialization is rejected.
    """

    def __init__(self, audit_logger: AuditLogger | None = None):
        """
        Create an uninitialized proxy.

        Args:
            audit_logger: Optional audit trail for administrative calls
        """
        self._audit = audit_logger
        self._write_lock = threading.Lock()
        self._initialized = False
        self._name = ""
        self._owner: str | None = None
        self._directory = RegistryDirectory()
        self._blacklist = Blacklist()
        self._snapshot: ProxySnapshot = EMPTY_SNAPSHOT

    # =========================================================================
    # Descriptor and ownership
    # =========================================================================

    @property
    def name(self) -> str:
        """Name set by ``initialize``; empty before."""
        return self._name

    @property
    def version(self) -> str:
        return PROXY_VERSION

    @property
    def owner(self) -> str | None:
        return self._owner

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, name: str, *, caller: str) -> None:
        """
        Set the proxy name and make the caller its owner.

        Raises:
            InitializationError: If the proxy was already initialized
        """
        with self._write_lock:
            if self._initialized:
                logger.warning(f"Re-initialization of proxy {self._name!r} attempted by {caller}")
                self._record(
                    AuditEventType.PROXY_INITIALIZE,
                    caller,
                    name,
                    AuditResult.REJECTED,
                    error="already initialized",
                )
                raise InitializationError(name=self._name)

            self._name = name
            self._owner = caller
            self._initialized = True

        logger.info(f"Proxy {name!r} initialized, owner={caller}")
        self._record(AuditEventType.PROXY_INITIALIZE, caller, name, AuditResult.SUCCESS)

    def transfer_ownership(self, new_owner: str, *, caller: str) -> None:
        """Hand the owner capability to another principal."""

        def apply() -> None:
            self._owner = new_owner

        self._mutate(AuditEventType.OWNERSHIP_TRANSFER, caller, new_owner, apply)

    # =========================================================================
    # Registry directory
    # =========================================================================

    def add_registry(self, label: str, source: Hashable, *, caller: str) -> None:
        """
        Register a source under a label, initially active.

        Raises:
            AuthorizationError: If the caller is not the owner
            ExistRegistryError: If the source is already registered
        """
        self._mutate(
            AuditEventType.REGISTRY_ADD,
            caller,
            describe_source(source),
            lambda: self._directory.add(label, source),
            metadata={"label": label},
        )

    def remove_registry(self, source: Hashable, *, caller: str) -> None:
        """
        Remove a source, whether active or paused.

        Raises:
            AuthorizationError: If the caller is not the owner
            NotExistRegistryError: If the source is not registered
        """
        self._mutate(
            AuditEventType.REGISTRY_REMOVE,
            caller,
            describe_source(source),
            lambda: self._directory.remove(source),
        )

    def pause_registry(self, source: Hashable, *, caller: str) -> None:
        """
        Exclude a registered source from decisions without removing it.

        Raises:
            AuthorizationError: If the caller is not the owner
            NotExistRegistryError: If the source is not registered
            PausedRegistryError: If the source is already paused
        """
        self._mutate(
            AuditEventType.REGISTRY_PAUSE,
            caller,
            describe_source(source),
            lambda: self._directory.pause(source),
        )

    def unpause_registry(self, source: Hashable, *, caller: str) -> None:
        """
        Put a paused source back into consideration.

        Raises:
            AuthorizationError: If the caller is not the owner
            NotExistRegistryError: If the source is not registered
            UnpausedRegistryError: If the source is not paused
        """
        self._mutate(
            AuditEventType.REGISTRY_UNPAUSE,
            caller,
            describe_source(source),
            lambda: self._directory.unpause(source),
        )

    def get_registry_info(self, source: Hashable) -> RegistryInfo:
        """Return (label, paused); ("", False) for an unknown source."""
        return self._snapshot.registry_info(source)

    def registries(self) -> list[Hashable]:
        """All registered sources, each exactly once. Order is unspecified."""
        return [entry.source for entry in self._snapshot.entries]

    def total_registry(self) -> int:
        """Number of registered sources, paused ones included."""
        return len(self._snapshot.entries)

    # =========================================================================
    # Blacklist
    # =========================================================================

    def add_blacklist(self, identity: str, *, caller: str) -> None:
        """
        Deny an identity regardless of any registry.

        Raises:
            AuthorizationError: If the caller is not the owner
            AccountBlacklistedError: If the identity is already blacklisted
        """
        self._mutate(
            AuditEventType.BLACKLIST_ADD,
            caller,
            identity,
            lambda: self._blacklist.add(identity),
        )

    def remove_blacklist(self, identity: str, *, caller: str) -> None:
        """
        Lift the denial of an identity.

        Raises:
            AuthorizationError: If the caller is not the owner
            AccountNotBlacklistedError: If the identity is not blacklisted
        """
        self._mutate(
            AuditEventType.BLACKLIST_REMOVE,
            caller,
            identity,
            lambda: self._blacklist.remove(identity),
        )

    def is_blacklist(self, identity: str) -> bool:
        return self._snapshot.is_blacklist(identity)

    # =========================================================================
    # Decision
    # =========================================================================

    def is_allowlist(self, identity: str) -> bool:
        """
        Aggregate allow decision.

        The blacklist and the directory are read from the same snapshot. The
        scan stops at the first active registry that allows the identity.
        """
        allowed = self._snapshot.is_allowlist(identity)
        logger.debug(f"is_allowlist({identity}) -> {allowed}")
        return allowed

    def snapshot(self) -> ProxySnapshot:
        """Current immutable view of directory and blacklist."""
        return self._snapshot

    def authorize(
        self,
        event_type: AuditEventType,
        *,
        caller: str,
        target: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Check the owner gate for an operation without changing state.

        For callers that must stop before reaching the proxy, such as an
        address that resolves to no source. Denials are logged and audited
        like those of the mutation itself.

        Raises:
            AuthorizationError: If the caller is not the owner
        """
        operation = event_type.value
        try:
            self._require_owner(caller, operation)
        except AuthorizationError as e:
            logger.warning(f"Unauthorized {operation} by {caller} on {target}")
            self._record(
                event_type, caller, target, AuditResult.DENIED, metadata, error=e.message
            )
            raise

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_owner(self, caller: str, operation: str) -> None:
        if self._owner is None or caller != self._owner:
            raise AuthorizationError(caller=caller, operation=operation)

    def _mutate(
        self,
        event_type: AuditEventType,
        caller: str,
        target: str,
        apply: Callable[[], Any],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Run one administrative change under the write lock.

        Authorization is checked before any state is touched. ``apply`` either
        raises without side effects or completes; only then is a new snapshot
        published.
        """
        operation = event_type.value
        with self._write_lock:
            self.authorize(event_type, caller=caller, target=target, metadata=metadata)

            try:
                apply()
            except AllowlistProxyError as e:
                logger.warning(f"Rejected {operation} on {target}: {e}")
                self._record(
                    event_type, caller, target, AuditResult.REJECTED, metadata, error=e.message
                )
                raise

            self._snapshot = ProxySnapshot.of(
                self._directory.snapshot(), self._blacklist.snapshot()
            )

        logger.info(f"{operation} {target} by {caller}")
        self._record(event_type, caller, target, AuditResult.SUCCESS, metadata)

    def _record(
        self,
        event_type: AuditEventType,
        caller: str,
        target: str,
        result: AuditResult,
        metadata: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        if self._audit is None:
            return
        severity = AuditLevel.INFO if result == AuditResult.SUCCESS else AuditLevel.WARNING
        self._audit.log(
            AuditEvent(
                event_type=event_type,
                actor=caller,
                target=target,
                result=result,
                severity=severity,
                metadata=metadata or {},
                error_message=error,
            )
        )
