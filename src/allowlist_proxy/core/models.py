"""
Core data models for the allowlist proxy.

Defines the allow-query capability consumed by the proxy and the value
types exchanged between the directory, the blacklist and the engine.
"""

from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Hashable, Mapping, NamedTuple, Protocol, runtime_checkable


@runtime_checkable
class AllowlistSource(Protocol):
    """
    Allow-query capability of a backing registry.

    The proxy only ever calls ``is_allowlist``; how identities get into
    the source's allow-set is the source's own business.
    """

    def is_allowlist(self, identity: str) -> bool:
        """Return True if the identity is allowed by this source."""
        ...


class RegistryState(str, Enum):
    """Lifecycle state of a directory entry."""

    ACTIVE = "active"
    PAUSED = "paused"


class RegistryInfo(NamedTuple):
    """Label and pause flag of a directory entry."""

    label: str
    paused: bool


MISSING_REGISTRY_INFO = RegistryInfo(label="", paused=False)


@dataclass(frozen=True)
class RegistryEntry:
    """A registered source with its label and paused flag."""

    label: str
    source: Hashable
    paused: bool = False

    @property
    def state(self) -> RegistryState:
        """Current lifecycle state."""
        return RegistryState.PAUSED if self.paused else RegistryState.ACTIVE

    @property
    def info(self) -> RegistryInfo:
        """Return the (label, paused) view of this entry."""
        return RegistryInfo(label=self.label, paused=self.paused)

    def with_paused(self, paused: bool) -> "RegistryEntry":
        """Return a copy with the paused flag replaced."""
        return replace(self, paused=paused)


class ProxySnapshot(NamedTuple):
    """
    Immutable view of the proxy state at one point in time.

    Published as a whole after every successful mutation; readers never
    observe a directory from one mutation paired with a blacklist from another.
    Build with ``ProxySnapshot.of`` so the source index matches the entries.
    """

    entries: tuple[RegistryEntry, ...]
    blacklist: frozenset[str]
    index: Mapping[Hashable, int]

    @classmethod
    def of(
        cls, entries: tuple[RegistryEntry, ...], blacklist: frozenset[str]
    ) -> "ProxySnapshot":
        """Snapshot of the given entries and blacklist, indexed by source."""
        index = MappingProxyType({entry.source: i for i, entry in enumerate(entries)})
        return cls(entries=entries, blacklist=blacklist, index=index)

    def registry_info(self, source: Hashable) -> RegistryInfo:
        """Return (label, paused), or ("", False) when the source is unknown."""
        position = self.index.get(source)
        if position is None:
            return MISSING_REGISTRY_INFO
        return self.entries[position].info

    def is_blacklist(self, identity: str) -> bool:
        """Blacklist membership in this snapshot."""
        return identity in self.blacklist

    def is_allowlist(self, identity: str) -> bool:
        """
        Aggregate allow decision against this snapshot.

        The blacklist is an absolute veto. Otherwise the first active entry
        whose source allows the identity decides; paused entries are skipped.
        """
        if identity in self.blacklist:
            return False
        for entry in self.entries:
            if entry.paused:
                continue
            if entry.source.is_allowlist(identity):
                return True
        return False


EMPTY_SNAPSHOT = ProxySnapshot.of((), frozenset())
