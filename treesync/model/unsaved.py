"""Unsaved-state propagation through directory ancestors.

Each directory keeps ``dirty_count``: the number of distinct unsaved files in
its subtree. Counts are maintained incrementally and clamp at zero.
"""

from __future__ import annotations

import logging

from ..presentation.sink import PresentationSink
from .arena import EntryArena
from .types import DirectoryEntry, Entry, FileEntry

logger = logging.getLogger(__name__)


def unsaved_weight(entry: Entry) -> int:
    """Return how many unsaved files ``entry`` contributes to its ancestors."""
    if isinstance(entry, DirectoryEntry):
        return entry.dirty_count
    return 1 if entry.unsaved else 0


def _apply_delta(directory: DirectoryEntry, delta: int, sink: PresentationSink) -> None:
    had_unsaved = directory.has_unsaved
    count = directory.dirty_count + delta
    if count < 0:
        logger.warning("unsaved count underflow on %s (%d), clamping to 0", directory.path, count)
        count = 0
    directory.dirty_count = count
    if directory.has_unsaved != had_unsaved:
        sink.unsaved_changed(directory, directory.has_unsaved)


def adjust_ancestors(arena: EntryArena, entry: Entry, delta: int, sink: PresentationSink) -> None:
    """Add ``delta`` to ``dirty_count`` of every ancestor directory of ``entry``."""
    if delta == 0:
        return
    for directory in arena.ancestors(entry):
        _apply_delta(directory, delta, sink)


def set_entry_unsaved(
    arena: EntryArena,
    entry: FileEntry,
    unsaved: bool,
    sink: PresentationSink,
) -> bool:
    """Set ``entry``'s unsaved flag and propagate the change to its ancestors.

    Returns ``False`` (and changes nothing) when the flag already has the
    requested value, so repeated calls cannot over- or under-count.
    """
    unsaved = bool(unsaved)
    if entry.unsaved == unsaved:
        logger.debug("unsaved flag of %s already %s", entry.path, unsaved)
        return False
    entry.unsaved = unsaved
    sink.unsaved_changed(entry, unsaved)
    adjust_ancestors(arena, entry, 1 if unsaved else -1, sink)
    return True


__all__ = ["unsaved_weight", "adjust_ancestors", "set_entry_unsaved"]
