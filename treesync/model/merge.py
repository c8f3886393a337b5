"""Merge/diff of a directory's children against a fresh scan.

Entries whose name and file-vs-directory kind are unchanged are kept as the very
same objects so presentation state attached to them (selection, expansion,
scroll) survives a rescan. Everything else is destroyed and recreated.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..presentation.sink import PresentationSink
from .arena import EntryArena
from .scanner import ScannedChild
from .types import DirectoryEntry, DirLifecycle, Entry, EntryKind
from .unsaved import adjust_ancestors, unsaved_weight

logger = logging.getLogger(__name__)

CREATED = "created"
KEPT = "kept"
UPDATED = "updated"
REPLACED = "replaced"
REMOVED = "removed"


@dataclass(frozen=True)
class MergeEvent:
    """One structural change produced by ``merge_children``."""

    action: str
    name: str
    entry_id: int
    kind: EntryKind


def _discard_subtree(arena: EntryArena, entry: Entry) -> None:
    stack = [entry]
    while stack:
        current = stack.pop()
        arena.discard(current.entry_id)
        if isinstance(current, DirectoryEntry):
            stack.extend(arena.children_of(current))
            current.children = {}
            current.lifecycle = DirLifecycle.UNINITIALIZED


def destroy_entry(arena: EntryArena, entry_id: int, sink: PresentationSink) -> Entry | None:
    """Detach and recursively destroy ``entry_id``.

    Unsaved files inside the destroyed subtree are subtracted from every
    surviving ancestor so no stale unsaved indicator lingers.
    """
    entry = arena.get(entry_id)
    if entry is None:
        return None

    adjust_ancestors(arena, entry, -unsaved_weight(entry), sink)

    parent = arena.directory(entry.parent_id)
    if parent is not None and parent.children.get(entry.name) == entry_id:
        del parent.children[entry.name]

    sink.entry_removed(entry)
    _discard_subtree(arena, entry)
    return entry


def clear_children(arena: EntryArena, directory: DirectoryEntry, sink: PresentationSink) -> None:
    """Destroy every child of ``directory``."""
    for child_id in list(directory.children.values()):
        destroy_entry(arena, child_id, sink)
    directory.children = {}


def _create_child(
    arena: EntryArena,
    directory: DirectoryEntry,
    child: ScannedChild,
    position: int,
    sink: PresentationSink,
) -> Entry:
    entry = arena.add(directory.path / child.name, child.kind, directory.entry_id)
    entry.handle = sink.entry_created(entry, directory, position)
    if isinstance(entry, DirectoryEntry):
        entry.placeholder = sink.placeholder_added(entry)
    return entry


def merge_children(
    arena: EntryArena,
    directory: DirectoryEntry,
    listing: Sequence[ScannedChild],
    sink: PresentationSink,
) -> list[MergeEvent]:
    """Replace ``directory``'s children with ``listing``, preserving identity.

    Afterwards the child keys equal exactly the names in ``listing`` and the
    directory is ``READY``.
    """
    old_children = directory.children
    new_children: dict[str, int] = {}
    ordered: list[Entry] = []
    events: list[MergeEvent] = []

    for position, child in enumerate(listing):
        if child.name in new_children:
            logger.debug("duplicate name %r in listing of %s", child.name, directory.path)
            continue

        existing = arena.get(old_children.get(child.name))
        if existing is not None and existing.is_dir == child.kind.is_directory:
            new_children[child.name] = existing.entry_id
            ordered.append(existing)
            action = KEPT
            if existing.kind is not child.kind:
                # Same file, new presentation class (e.g. gained an exec bit).
                existing.kind = child.kind
                sink.entry_updated(existing)
                action = UPDATED
            events.append(MergeEvent(action, child.name, existing.entry_id, child.kind))
            continue

        action = CREATED
        if existing is not None:
            destroy_entry(arena, existing.entry_id, sink)
            action = REPLACED

        entry = _create_child(arena, directory, child, position, sink)
        new_children[child.name] = entry.entry_id
        ordered.append(entry)
        events.append(MergeEvent(action, child.name, entry.entry_id, child.kind))

    for name, child_id in list(old_children.items()):
        if name in new_children:
            continue
        stale = destroy_entry(arena, child_id, sink)
        if stale is not None:
            events.append(MergeEvent(REMOVED, name, child_id, stale.kind))

    directory.children = new_children
    directory.lifecycle = DirLifecycle.READY
    directory.last_error = None
    sink.children_reordered(directory, ordered)
    return events


def apply_scan_error(
    arena: EntryArena,
    directory: DirectoryEntry,
    message: str,
    sink: PresentationSink,
) -> None:
    """Replace ``directory``'s children with a single error placeholder.

    The lifecycle falls back to ``UNINITIALIZED`` so the next refresh (or a
    lazy resolve through it) retries the scan.
    """
    clear_children(arena, directory, sink)
    directory.placeholder = sink.entry_error(directory, message)
    directory.last_error = message
    directory.lifecycle = DirLifecycle.UNINITIALIZED


__all__ = [
    "CREATED",
    "KEPT",
    "UPDATED",
    "REPLACED",
    "REMOVED",
    "MergeEvent",
    "destroy_entry",
    "clear_children",
    "merge_children",
    "apply_scan_error",
]
