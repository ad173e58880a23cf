"""Tests for the registry directory and the blacklist."""

import pytest

from allowlist_proxy.core.exceptions import (
    AccountBlacklistedError,
    AccountNotBlacklistedError,
    ExistRegistryError,
    NotExistRegistryError,
    PausedRegistryError,
    UnpausedRegistryError,
)
from allowlist_proxy.core.models import (
    MISSING_REGISTRY_INFO,
    ProxySnapshot,
    RegistryEntry,
    RegistryInfo,
    RegistryState,
)
from allowlist_proxy.proxy.blacklist import Blacklist
from allowlist_proxy.registry.directory import RegistryDirectory


class StaticSource:
    """Source with a fixed allow-set that counts its queries."""

    def __init__(self, *allowed: str):
        self.allowed = set(allowed)
        self.calls = 0

    def is_allowlist(self, identity: str) -> bool:
        self.calls += 1
        return identity in self.allowed


class TestRegistryEntry:
    """Tests for RegistryEntry."""

    def test_state(self) -> None:
        """State follows the paused flag."""
        entry = RegistryEntry(label="X", source="0x1")
        assert entry.state == RegistryState.ACTIVE
        assert entry.with_paused(True).state == RegistryState.PAUSED

    def test_with_paused_returns_copy(self) -> None:
        """with_paused leaves the original untouched."""
        entry = RegistryEntry(label="X", source="0x1")
        paused = entry.with_paused(True)
        assert not entry.paused
        assert paused.info == RegistryInfo(label="X", paused=True)


class TestRegistryDirectory:
    """Tests for RegistryDirectory."""

    @staticmethod
    def _view(directory: RegistryDirectory) -> ProxySnapshot:
        return ProxySnapshot.of(directory.snapshot(), frozenset())

    def test_add(self) -> None:
        """Added sources are active."""
        directory = RegistryDirectory()
        entry = directory.add("Token X", "0x1")

        assert entry.state == RegistryState.ACTIVE
        assert directory.snapshot() == (entry,)
        assert self._view(directory).registry_info("0x1") == ("Token X", False)

    def test_add_duplicate_keeps_label(self) -> None:
        """A source cannot be added twice; the first label stays."""
        directory = RegistryDirectory()
        directory.add("first", "0x1")
        with pytest.raises(ExistRegistryError):
            directory.add("second", "0x1")
        assert [entry.label for entry in directory.snapshot()] == ["first"]

    def test_labels_may_repeat(self) -> None:
        """Two sources can share a label."""
        directory = RegistryDirectory()
        directory.add("same", "0x1")
        directory.add("same", "0x2")
        assert len(directory.snapshot()) == 2

    def test_remove(self) -> None:
        """Removed sources are gone."""
        directory = RegistryDirectory()
        directory.add("X", "0x1")
        removed = directory.remove("0x1")

        assert removed.source == "0x1"
        assert directory.snapshot() == ()
        assert self._view(directory).registry_info("0x1") == MISSING_REGISTRY_INFO

    def test_remove_missing(self) -> None:
        """Removing an unknown source fails."""
        with pytest.raises(NotExistRegistryError) as exc_info:
            RegistryDirectory().remove("0x1")
        assert exc_info.value.operation == "remove_registry"

    def test_remove_moves_last_into_gap(self) -> None:
        """The last entry takes the place of the removed one."""
        directory = RegistryDirectory()
        for source in ("0x1", "0x2", "0x3"):
            directory.add(source, source)

        directory.remove("0x1")
        assert [entry.source for entry in directory.snapshot()] == ["0x3", "0x2"]

        directory.remove("0x2")
        assert [entry.source for entry in directory.snapshot()] == ["0x3"]

    def test_positions_stay_consistent(self) -> None:
        """Every remaining source stays addressable after removals."""
        directory = RegistryDirectory()
        sources = [f"0x{i}" for i in range(6)]
        for source in sources:
            directory.add(source, source)

        directory.remove("0x2")
        directory.remove("0x0")
        directory.pause("0x5")

        remaining = {"0x1", "0x3", "0x4", "0x5"}
        view = self._view(directory)
        assert set(view.index) == remaining
        for source in remaining:
            assert view.registry_info(source).label == source
        assert view.registry_info("0x5").paused

    def test_remove_paused(self) -> None:
        """A paused source can be removed."""
        directory = RegistryDirectory()
        directory.add("X", "0x1")
        directory.pause("0x1")
        directory.remove("0x1")
        assert directory.snapshot() == ()

    def test_pause_and_unpause(self) -> None:
        """Pause and unpause toggle the flag."""
        directory = RegistryDirectory()
        directory.add("X", "0x1")

        assert directory.pause("0x1").paused
        assert self._view(directory).registry_info("0x1").paused

        assert not directory.unpause("0x1").paused
        assert not self._view(directory).registry_info("0x1").paused

    def test_pause_twice(self) -> None:
        """Pausing a paused source fails."""
        directory = RegistryDirectory()
        directory.add("X", "0x1")
        directory.pause("0x1")
        with pytest.raises(PausedRegistryError):
            directory.pause("0x1")

    def test_unpause_active(self) -> None:
        """Unpausing an active source fails."""
        directory = RegistryDirectory()
        directory.add("X", "0x1")
        with pytest.raises(UnpausedRegistryError):
            directory.unpause("0x1")

    def test_pause_missing(self) -> None:
        """Pausing an unknown source fails with the missing error first."""
        with pytest.raises(NotExistRegistryError):
            RegistryDirectory().pause("0x1")
        with pytest.raises(NotExistRegistryError):
            RegistryDirectory().unpause("0x1")

    def test_snapshot_is_detached(self) -> None:
        """Later mutations do not change an earlier snapshot."""
        directory = RegistryDirectory()
        directory.add("X", "0x1")
        snapshot = directory.snapshot()

        directory.add("Y", "0x2")
        directory.pause("0x1")

        assert len(snapshot) == 1
        assert not snapshot[0].paused


class TestBlacklist:
    """Tests for Blacklist."""

    def test_add(self) -> None:
        blacklist = Blacklist()
        blacklist.add("0xa")
        assert blacklist.snapshot() == frozenset({"0xa"})

    def test_add_twice(self) -> None:
        """Blacklisting twice fails."""
        blacklist = Blacklist()
        blacklist.add("0xa")
        with pytest.raises(AccountBlacklistedError):
            blacklist.add("0xa")

    def test_remove(self) -> None:
        blacklist = Blacklist()
        blacklist.add("0xa")
        blacklist.remove("0xa")
        assert blacklist.snapshot() == frozenset()

    def test_remove_missing(self) -> None:
        """Removing an identity that is not blacklisted fails."""
        with pytest.raises(AccountNotBlacklistedError):
            Blacklist().remove("0xa")

    def test_snapshot_is_frozen_copy(self) -> None:
        blacklist = Blacklist()
        blacklist.add("0xa")
        snapshot = blacklist.snapshot()
        blacklist.add("0xb")
        assert snapshot == frozenset({"0xa"})


class TestProxySnapshot:
    """Tests for the decision rule on a snapshot."""

    def test_blacklist_vetoes(self) -> None:
        """A blacklisted identity is denied and no source is consulted."""
        source = StaticSource("0xa")
        snapshot = ProxySnapshot.of((RegistryEntry("X", source),), frozenset({"0xa"}))
        assert not snapshot.is_allowlist("0xa")
        assert source.calls == 0

    def test_paused_entries_skipped(self) -> None:
        """Paused sources are never consulted."""
        source = StaticSource("0xa")
        snapshot = ProxySnapshot.of((RegistryEntry("X", source, paused=True),), frozenset())
        assert not snapshot.is_allowlist("0xa")
        assert source.calls == 0

    def test_stops_at_first_match(self) -> None:
        """The scan ends at the first source that allows."""
        first = StaticSource("0xa")
        second = StaticSource("0xa")
        snapshot = ProxySnapshot.of(
            (RegistryEntry("1", first), RegistryEntry("2", second)), frozenset()
        )
        assert snapshot.is_allowlist("0xa")
        assert first.calls == 1
        assert second.calls == 0

    def test_no_match(self) -> None:
        """Denied when no active source allows."""
        source = StaticSource()
        snapshot = ProxySnapshot.of((RegistryEntry("X", source),), frozenset())
        assert not snapshot.is_allowlist("0xa")
        assert source.calls == 1

    def test_registry_info_uses_index(self) -> None:
        """Info lookups resolve through the source index, not a scan."""
        first = StaticSource()
        second = StaticSource()
        snapshot = ProxySnapshot.of(
            (RegistryEntry("1", first), RegistryEntry("2", second, paused=True)), frozenset()
        )
        assert dict(snapshot.index) == {first: 0, second: 1}
        assert snapshot.registry_info(second) == RegistryInfo("2", True)
        assert snapshot.registry_info(StaticSource()) == MISSING_REGISTRY_INFO

    def test_index_is_read_only(self) -> None:
        snapshot = ProxySnapshot.of((RegistryEntry("X", "0x1"),), frozenset())
        with pytest.raises(TypeError):
            snapshot.index["0x2"] = 1  # type: ignore[index]
