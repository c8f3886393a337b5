"""Presentation sink: the notifications the tree core emits.

The core never reads anything back from the sink except the opaque handles it
returns, which are stored on entries and handed back on later calls.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.types import DirectoryEntry, Entry


class PresentationSink:
    """No-op base sink; adapters override the notifications they render."""

    def entry_created(self, entry: Entry, parent: DirectoryEntry | None, position: int) -> object | None:
        """An entry was allocated; ``position`` is its index in the parent's listing."""
        return None

    def entry_updated(self, entry: Entry) -> None:
        """A kept entry changed presentation class (e.g. a file became executable)."""

    def entry_removed(self, entry: Entry) -> None:
        """An entry (and, for directories, its whole subtree) was destroyed."""

    def entry_error(self, parent: DirectoryEntry, message: str) -> object | None:
        """A scan of ``parent`` failed; return a handle for the error placeholder row."""
        return None

    def placeholder_added(self, directory: DirectoryEntry) -> object | None:
        """A not-yet-loaded directory needs a temporary child row."""
        return None

    def placeholder_removed(self, directory: DirectoryEntry, handle: object | None) -> None:
        """The loading or error placeholder of ``directory`` is gone."""

    def unsaved_changed(self, entry: Entry, unsaved: bool) -> None:
        """A file's unsaved flag, or a directory's unsaved-descendant flag, changed."""

    def sensitivity_changed(self, entry: DirectoryEntry, sensitive: bool) -> None:
        """A directory became busy (insensitive) or interactive again."""

    def children_reordered(self, parent: DirectoryEntry, entries: Sequence[Entry]) -> None:
        """Display order of ``parent``'s children after a successful merge."""

    def busy_changed(self, busy: bool) -> None:
        """At least one scan started (``True``) or all scans finished (``False``)."""


class RecordingSink(PresentationSink):
    """Sink that records every notification as a tuple in ``events``."""

    def __init__(self) -> None:
        self.events: list[tuple[object, ...]] = []
        self._next_handle = 1

    def _handle(self, prefix: str) -> str:
        handle = f"{prefix}-{self._next_handle}"
        self._next_handle += 1
        return handle

    def entry_created(self, entry: Entry, parent: DirectoryEntry | None, position: int) -> object | None:
        self.events.append(("created", entry.path, position))
        return self._handle("row")

    def entry_updated(self, entry: Entry) -> None:
        self.events.append(("updated", entry.path, entry.kind))

    def entry_removed(self, entry: Entry) -> None:
        self.events.append(("removed", entry.path))

    def entry_error(self, parent: DirectoryEntry, message: str) -> object | None:
        self.events.append(("error", parent.path, message))
        return self._handle("error")

    def placeholder_added(self, directory: DirectoryEntry) -> object | None:
        self.events.append(("placeholder_added", directory.path))
        return self._handle("placeholder")

    def placeholder_removed(self, directory: DirectoryEntry, handle: object | None) -> None:
        self.events.append(("placeholder_removed", directory.path, handle))

    def unsaved_changed(self, entry: Entry, unsaved: bool) -> None:
        self.events.append(("unsaved", entry.path, unsaved))

    def sensitivity_changed(self, entry: DirectoryEntry, sensitive: bool) -> None:
        self.events.append(("sensitive", entry.path, sensitive))

    def children_reordered(self, parent: DirectoryEntry, entries: Sequence[Entry]) -> None:
        self.events.append(("reordered", parent.path, tuple(entry.name for entry in entries)))

    def busy_changed(self, busy: bool) -> None:
        self.events.append(("busy", busy))

    def of_type(self, kind: str) -> list[tuple[object, ...]]:
        """Return recorded events whose first element equals ``kind``."""
        return [event for event in self.events if event[0] == kind]


__all__ = ["PresentationSink", "RecordingSink"]
