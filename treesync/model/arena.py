"""Arena that owns every tree entry under stable integer ids.

Ids increase monotonically and are never reused, so a stale id held by an
outstanding scan can always be told apart from a live entry.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from ..errors import UnknownEntryError
from .types import DirectoryEntry, Entry, EntryKind, FileEntry


class EntryArena:
    """Id -> entry storage plus parent/child navigation helpers."""

    def __init__(self) -> None:
        self._entries: dict[int, Entry] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def _allocate_id(self) -> int:
        entry_id = self._next_id
        self._next_id += 1
        return entry_id

    def add_file(self, path: Path, kind: EntryKind, parent_id: int | None) -> FileEntry:
        """Allocate a file entry under ``parent_id``."""
        entry = FileEntry(entry_id=self._allocate_id(), path=path, kind=kind, parent_id=parent_id)
        self._entries[entry.entry_id] = entry
        return entry

    def add_directory(self, path: Path, parent_id: int | None) -> DirectoryEntry:
        """Allocate an uninitialized directory entry under ``parent_id``."""
        entry = DirectoryEntry(entry_id=self._allocate_id(), path=path, parent_id=parent_id)
        self._entries[entry.entry_id] = entry
        return entry

    def add(self, path: Path, kind: EntryKind, parent_id: int | None) -> Entry:
        """Allocate a file or directory entry depending on ``kind``."""
        if kind.is_directory:
            return self.add_directory(path, parent_id)
        return self.add_file(path, kind, parent_id)

    def get(self, entry_id: int | None) -> Entry | None:
        if entry_id is None:
            return None
        return self._entries.get(entry_id)

    def require(self, entry_id: int) -> Entry:
        """Return the live entry for ``entry_id`` or raise ``UnknownEntryError``."""
        entry = self._entries.get(entry_id)
        if entry is None:
            raise UnknownEntryError(entry_id)
        return entry

    def directory(self, entry_id: int | None) -> DirectoryEntry | None:
        """Return the live directory for ``entry_id``, ``None`` for files or stale ids."""
        entry = self.get(entry_id)
        return entry if isinstance(entry, DirectoryEntry) else None

    def contains(self, entry: Entry) -> bool:
        """Return whether ``entry`` itself (not just its id) is still live."""
        return self._entries.get(entry.entry_id) is entry

    def discard(self, entry_id: int) -> Entry | None:
        return self._entries.pop(entry_id, None)

    def child(self, directory: DirectoryEntry, name: str) -> Entry | None:
        return self.get(directory.children.get(name))

    def children_of(self, directory: DirectoryEntry) -> list[Entry]:
        """Return live children of ``directory`` in mapping order."""
        out: list[Entry] = []
        for child_id in directory.children.values():
            child = self._entries.get(child_id)
            if child is not None:
                out.append(child)
        return out

    def ancestors(self, entry: Entry) -> Iterator[DirectoryEntry]:
        """Yield live ancestor directories from the parent up to the root."""
        parent = self.directory(entry.parent_id)
        while parent is not None:
            yield parent
            parent = self.directory(parent.parent_id)

    def iter_entries(self) -> Iterator[Entry]:
        return iter(list(self._entries.values()))

    def clear(self) -> None:
        self._entries.clear()


__all__ = ["EntryArena"]
