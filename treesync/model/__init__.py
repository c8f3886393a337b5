"""Entry model for the synchronized file tree.

This package contains the non-UI tree primitives:
- entry datatypes and the id arena that owns them
- the blocking directory scanner and item classification
- the merge/diff engine that preserves entry identity across rescans
- unsaved-state propagation through ancestor directories
"""

from __future__ import annotations

from .types import DirectoryEntry, DirLifecycle, Entry, EntryKind, FileEntry, RefreshState
from .arena import EntryArena
from .scanner import RawChild, ScannedChild, ScanResult, classify, list_directory, scan_directory
from .unsaved import adjust_ancestors, set_entry_unsaved
from .merge import MergeEvent, apply_scan_error, destroy_entry, merge_children

__all__ = [
    "DirectoryEntry",
    "DirLifecycle",
    "Entry",
    "EntryKind",
    "FileEntry",
    "RefreshState",
    "EntryArena",
    "RawChild",
    "ScannedChild",
    "ScanResult",
    "classify",
    "list_directory",
    "scan_directory",
    "adjust_ancestors",
    "set_entry_unsaved",
    "MergeEvent",
    "apply_scan_error",
    "destroy_entry",
    "merge_children",
]
