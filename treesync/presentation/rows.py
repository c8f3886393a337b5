"""Row model: projects tree notifications into displayable rows.

Each entry gets one ``Row`` keyed by the integer handle returned from
``entry_created``. Rows keep their own ordered child-handle lists, so the model
can be rendered without reading the entry tree.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..model.types import DirectoryEntry, Entry, EntryKind
from .icons import ERROR_ICON, LOADING_ICON, UNSAVED_DOT, icon_for
from .sink import PresentationSink


@dataclass
class Row:
    """One visual row (entry, loading placeholder or error message)."""

    handle: int
    icon: str
    label: str
    path: Path | None = None
    kind: EntryKind | None = None
    parent: int | None = None
    unsaved: str = ""
    sensitive: bool = True
    is_error: bool = False
    is_placeholder: bool = False
    children: list[int] = field(default_factory=list)

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


class RowModel(PresentationSink):
    """In-memory tree of rows driven by ``PresentationSink`` notifications."""

    def __init__(self) -> None:
        self.rows: dict[int, Row] = {}
        self.root_handle: int | None = None
        self.busy = False
        self._next_handle = 1

    def _add_row(self, row_parent: int | None, position: int | None = None, **fields: object) -> Row:
        handle = self._next_handle
        self._next_handle += 1
        row = Row(handle=handle, parent=row_parent, **fields)
        self.rows[handle] = row
        parent_row = self.rows.get(row_parent) if row_parent is not None else None
        if parent_row is not None:
            if position is None:
                parent_row.children.append(handle)
            else:
                parent_row.children.insert(max(0, min(position, len(parent_row.children))), handle)
        return row

    def _drop_row(self, handle: object | None) -> None:
        row = self.rows.get(handle) if isinstance(handle, int) else None
        if row is None:
            return
        parent_row = self.rows.get(row.parent) if row.parent is not None else None
        if parent_row is not None and handle in parent_row.children:
            parent_row.children.remove(handle)
        stack = [row]
        while stack:
            current = stack.pop()
            self.rows.pop(current.handle, None)
            stack.extend(self.rows[child] for child in current.children if child in self.rows)
        if handle == self.root_handle:
            self.root_handle = None

    def row_for(self, entry: Entry) -> Row | None:
        return self.rows.get(entry.handle) if isinstance(entry.handle, int) else None

    def child_rows(self, handle: int) -> list[Row]:
        row = self.rows.get(handle)
        if row is None:
            return []
        return [self.rows[child] for child in row.children if child in self.rows]

    def iter_rows(self, handle: int | None = None) -> Iterator[tuple[int, Row]]:
        """Yield ``(depth, row)`` pairs depth-first from ``handle`` (default: root)."""
        start = self.root_handle if handle is None else handle
        if start is None or start not in self.rows:
            return
        stack: list[tuple[int, int]] = [(0, start)]
        while stack:
            depth, current = stack.pop()
            row = self.rows[current]
            yield depth, row
            for child in reversed(row.children):
                if child in self.rows:
                    stack.append((depth + 1, child))

    # -- PresentationSink ----------------------------------------------------

    def entry_created(self, entry: Entry, parent: DirectoryEntry | None, position: int) -> object | None:
        parent_handle = parent.handle if parent is not None and isinstance(parent.handle, int) else None
        row = self._add_row(
            parent_handle,
            position,
            icon=icon_for(entry.kind),
            label=entry.name,
            path=entry.path,
            kind=entry.kind,
        )
        if parent is None:
            self.root_handle = row.handle
        return row.handle

    def entry_updated(self, entry: Entry) -> None:
        row = self.row_for(entry)
        if row is not None:
            row.kind = entry.kind
            row.icon = icon_for(entry.kind)

    def entry_removed(self, entry: Entry) -> None:
        self._drop_row(entry.handle)

    def entry_error(self, parent: DirectoryEntry, message: str) -> object | None:
        row = self._add_row(
            parent.handle if isinstance(parent.handle, int) else None,
            icon=ERROR_ICON,
            label=f"Error: {message}",
            sensitive=False,
            is_error=True,
        )
        return row.handle

    def placeholder_added(self, directory: DirectoryEntry) -> object | None:
        row = self._add_row(
            directory.handle if isinstance(directory.handle, int) else None,
            icon=LOADING_ICON,
            label="",
            sensitive=False,
            is_placeholder=True,
        )
        return row.handle

    def placeholder_removed(self, directory: DirectoryEntry, handle: object | None) -> None:
        self._drop_row(handle)

    def unsaved_changed(self, entry: Entry, unsaved: bool) -> None:
        row = self.row_for(entry)
        if row is not None:
            row.unsaved = UNSAVED_DOT if unsaved else ""

    def sensitivity_changed(self, entry: DirectoryEntry, sensitive: bool) -> None:
        row = self.row_for(entry)
        if row is not None:
            row.sensitive = sensitive

    def children_reordered(self, parent: DirectoryEntry, entries: Sequence[Entry]) -> None:
        row = self.row_for(parent)
        if row is None:
            return
        ordered = [entry.handle for entry in entries if isinstance(entry.handle, int) and entry.handle in self.rows]
        extras = [handle for handle in row.children if handle not in ordered]
        row.children = ordered + extras

    def busy_changed(self, busy: bool) -> None:
        self.busy = busy


__all__ = ["Row", "RowModel"]
