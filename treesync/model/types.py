"""Entry datatypes for the synchronized file tree.

Entries are mutable records owned by the interactive thread. Directories keep
child *ids* (see ``EntryArena``) instead of embedded references.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EntryKind(str, Enum):
    """Classification of one listed item.

    Directory vs file is fixed for an entry's lifetime. The file sub-kind
    (executable, media, generic) is presentation-only and may be updated in
    place when a rescan reclassifies the same file.
    """

    DIRECTORY = "directory"
    EXECUTABLE = "executable"
    MEDIA_AUDIO = "media:audio"
    MEDIA_VIDEO = "media:video"
    MEDIA_IMAGE = "media:image"
    GENERIC = "generic"

    @property
    def is_directory(self) -> bool:
        return self is EntryKind.DIRECTORY

    @property
    def is_media(self) -> bool:
        return self.value.startswith("media:")


class DirLifecycle(Enum):
    """Load state of a directory's children."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class RefreshState(Enum):
    """Refresh coalescer state; at most one scan runs while ``LOADING``."""

    IDLE = "idle"
    LOADING = "loading"


@dataclass(eq=False)
class FileEntry:
    """A non-directory entry."""

    entry_id: int
    path: Path
    kind: EntryKind
    parent_id: int | None = None
    unsaved: bool = False
    handle: object | None = None

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)

    @property
    def is_dir(self) -> bool:
        return False


@dataclass(eq=False)
class DirectoryEntry:
    """A directory entry with name -> child-id mapping and refresh bookkeeping."""

    entry_id: int
    path: Path
    parent_id: int | None = None
    children: dict[str, int] = field(default_factory=dict)
    dirty_count: int = 0
    lifecycle: DirLifecycle = DirLifecycle.UNINITIALIZED
    refresh_state: RefreshState = RefreshState.IDLE
    waiters: list[Callable[[], object]] = field(default_factory=list)
    placeholder: object | None = None
    last_error: str | None = None
    sensitive: bool = True
    handle: object | None = None

    @property
    def kind(self) -> EntryKind:
        return EntryKind.DIRECTORY

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)

    @property
    def is_dir(self) -> bool:
        return True

    @property
    def is_ready(self) -> bool:
        return self.lifecycle is DirLifecycle.READY

    @property
    def has_unsaved(self) -> bool:
        return self.dirty_count > 0


Entry = FileEntry | DirectoryEntry


__all__ = [
    "EntryKind",
    "DirLifecycle",
    "RefreshState",
    "FileEntry",
    "DirectoryEntry",
    "Entry",
]
