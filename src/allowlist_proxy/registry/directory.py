"""
Registry Directory - ordered collection of registered allow sources.

Each entry pairs a source handle with a human-readable label and a paused
flag. The source is the membership key; labels may repeat.
"""

import logging
from typing import Hashable

from allowlist_proxy.core.exceptions import (
    ExistRegistryError,
    NotExistRegistryError,
    PausedRegistryError,
    UnpausedRegistryError,
)
from allowlist_proxy.core.models import RegistryEntry

logger = logging.getLogger(__name__)


def describe_source(source: Hashable) -> str:
    """Printable handle for a source (its address when it has one)."""
    if isinstance(source, str):
        return source
    return str(getattr(source, "address", None) or repr(source))


class RegistryDirectory:
    """
    Directory of registry entries.

    Entries are kept in a list with a source -> position index. Removal moves
    the last entry into the vacated slot, so the order of the remaining
    entries is insertion order only until the first removal.

    Not synchronized: callers serialize mutations (the proxy does so under
    its write lock) and read through ``snapshot``.
    """

    def __init__(self) -> None:
        self._entries: list[RegistryEntry] = []
        self._positions: dict[Hashable, int] = {}

    def _position(self, source: Hashable, operation: str) -> int:
        try:
            return self._positions[source]
        except KeyError:
            raise NotExistRegistryError(
                subject=describe_source(source), operation=operation
            ) from None

    def add(self, label: str, source: Hashable) -> RegistryEntry:
        """
        Register a source as an active entry.

        Raises:
            ExistRegistryError: If the source is already registered
        """
        if source in self._positions:
            raise ExistRegistryError(subject=describe_source(source))

        entry = RegistryEntry(label=label, source=source)
        self._positions[source] = len(self._entries)
        self._entries.append(entry)
        logger.debug(f"Directory add: {label!r} -> {describe_source(source)}")
        return entry

    def remove(self, source: Hashable) -> RegistryEntry:
        """
        Erase the entry for a source, paused or not.

        Raises:
            NotExistRegistryError: If the source is not registered
        """
        position = self._position(source, "remove_registry")
        removed = self._entries[position]

        # Swap with last, then pop
        last = self._entries.pop()
        if last.source is not removed.source:
            self._entries[position] = last
            self._positions[last.source] = position
        del self._positions[source]

        logger.debug(f"Directory remove: {describe_source(source)}")
        return removed

    def pause(self, source: Hashable) -> RegistryEntry:
        """
        Mark an entry paused.

        Raises:
            NotExistRegistryError: If the source is not registered
            PausedRegistryError: If the entry is already paused
        """
        position = self._position(source, "pause_registry")
        entry = self._entries[position]
        if entry.paused:
            raise PausedRegistryError(subject=describe_source(source))

        self._entries[position] = entry.with_paused(True)
        return self._entries[position]

    def unpause(self, source: Hashable) -> RegistryEntry:
        """
        Mark a paused entry active again.

        Raises:
            NotExistRegistryError: If the source is not registered
            UnpausedRegistryError: If the entry is not paused
        """
        position = self._position(source, "unpause_registry")
        entry = self._entries[position]
        if not entry.paused:
            raise UnpausedRegistryError(subject=describe_source(source))

        self._entries[position] = entry.with_paused(False)
        return self._entries[position]

    def snapshot(self) -> tuple[RegistryEntry, ...]:
        """Immutable copy of the current entries."""
        return tuple(self._entries)
