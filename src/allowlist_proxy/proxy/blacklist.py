"""
Blacklist - process-wide denylist consulted after every registry.
"""

import logging

from allowlist_proxy.core.exceptions import AccountBlacklistedError, AccountNotBlacklistedError

logger = logging.getLogger(__name__)


class Blacklist:
    """
    Set of denied identities.

    Not synchronized on its own; the proxy serializes mutations and reads
    the published ``snapshot``.
    """

    def __init__(self) -> None:
        self._members: set[str] = set()

    def add(self, identity: str) -> None:
        """
        Deny an identity.

        Raises:
            AccountBlacklistedError: If the identity is already denied
        """
        if identity in self._members:
            raise AccountBlacklistedError(subject=identity)
        self._members.add(identity)
        logger.debug(f"Blacklist add: {identity}")

    def remove(self, identity: str) -> None:
        """
        Clear the denial of an identity.

        Raises:
            AccountNotBlacklistedError: If the identity is not denied
        """
        if identity not in self._members:
            raise AccountNotBlacklistedError(subject=identity)
        self._members.remove(identity)
        logger.debug(f"Blacklist remove: {identity}")

    def snapshot(self) -> frozenset[str]:
        """Immutable copy of the current members."""
        return frozenset(self._members)
