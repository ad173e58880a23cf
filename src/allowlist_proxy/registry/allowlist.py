"""
Allowlist Registry - an owner-administered allow-set.

A registry is one independent allow source behind the proxy. The proxy only
calls ``is_allowlist``; adding and removing identities is done by the
registry's own owner.
"""

import logging
import secrets
import threading

from allowlist_proxy.core.exceptions import AuthorizationError

logger = logging.getLogger(__name__)


def generate_address() -> str:
    """Generate a random 20-byte hex address."""
    return "0x" + secrets.token_hex(20)


class AllowlistRegistry:
    """
    A single allow source.

    Adding an identity that is already allowed, or removing one that is not,
    is a no-op. Mutations are owner-gated and serialized; reads work on an
    immutable set reference and never block.
    """

    def __init__(self, owner: str, address: str | None = None):
        """
        Initialize an empty registry.

        Args:
            owner: Principal allowed to mutate the allow-set
            address: External handle of the registry (generated if omitted)
        """
        self._owner = owner
        self._address = address or generate_address()
        self._lock = threading.Lock()
        self._members: frozenset[str] = frozenset()

    def __repr__(self) -> str:
        return f"AllowlistRegistry(address={self._address!r}, size={len(self._members)})"

    @property
    def address(self) -> str:
        """External handle of this registry."""
        return self._address

    @property
    def owner(self) -> str:
        """Principal allowed to mutate the allow-set."""
        return self._owner

    def _require_owner(self, caller: str, operation: str) -> None:
        if caller != self._owner:
            logger.warning(f"Unauthorized {operation} on registry {self._address} by {caller}")
            raise AuthorizationError(caller=caller, operation=operation)

    def add_allowlist(self, identity: str, *, caller: str) -> None:
        """Allow an identity."""
        with self._lock:
            self._require_owner(caller, "add_allowlist")
            self._members = self._members | {identity}
        logger.info(f"Registry {self._address}: allowed {identity}")

    def remove_allowlist(self, identity: str, *, caller: str) -> None:
        """Stop allowing an identity."""
        with self._lock:
            self._require_owner(caller, "remove_allowlist")
            self._members = self._members - {identity}
        logger.info(f"Registry {self._address}: disallowed {identity}")

    def is_allowlist(self, identity: str) -> bool:
        """Return True if the identity is in the allow-set."""
        return identity in self._members

    def members(self) -> list[str]:
        """Sorted list of allowed identities."""
        return sorted(self._members)
