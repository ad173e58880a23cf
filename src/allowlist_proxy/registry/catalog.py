"""
Source Catalog - locally hosted allowlist registries by address.

The proxy stores opaque source handles; outer surfaces (HTTP, CLI) refer to
sources by address and resolve them here.
"""

import logging
import threading

from allowlist_proxy.core.exceptions import DuplicateStateError, SourceNotFoundError
from allowlist_proxy.registry.allowlist import AllowlistRegistry

logger = logging.getLogger(__name__)


class SourceCatalog:
    """Thread-safe address -> AllowlistRegistry map."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sources: dict[str, AllowlistRegistry] = {}

    def __len__(self) -> int:
        return len(self._sources)

    def create(self, owner: str, address: str | None = None) -> AllowlistRegistry:
        """
        Host a new, empty registry owned by ``owner``.

        Raises:
            DuplicateStateError: If the address is already taken
        """
        registry = AllowlistRegistry(owner=owner, address=address)
        with self._lock:
            if registry.address in self._sources:
                raise DuplicateStateError(
                    "Source address already in use",
                    subject=registry.address,
                    operation="create_source",
                )
            self._sources[registry.address] = registry
        logger.info(f"Created allowlist source {registry.address} (owner={owner})")
        return registry

    def get(self, address: str) -> AllowlistRegistry:
        """
        Resolve an address.

        Raises:
            SourceNotFoundError: If no source is hosted at the address
        """
        registry = self._sources.get(address)
        if registry is None:
            raise SourceNotFoundError(subject=address)
        return registry

    def find(self, address: str) -> AllowlistRegistry | None:
        """Resolve an address, or None."""
        return self._sources.get(address)

    def list(self) -> list[AllowlistRegistry]:
        """All hosted sources in creation order."""
        with self._lock:
            return list(self._sources.values())
