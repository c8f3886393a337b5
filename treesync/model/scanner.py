"""Blocking single-directory scanner and item classification.

``scan_directory`` is a pure read: it returns a ``ScanResult`` value (listing or
error) and touches no shared tree state, so it is safe to run off the
interactive thread.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..errors import ScanError
from .types import EntryKind

logger = logging.getLogger(__name__)

EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH

MEDIA_EXTENSIONS: dict[EntryKind, frozenset[str]] = {
    EntryKind.MEDIA_AUDIO: frozenset({"flac", "opus", "mp3", "ogg", "oga", "m4a", "wav"}),
    EntryKind.MEDIA_VIDEO: frozenset({"mp4", "flv", "mkv", "webm"}),
    EntryKind.MEDIA_IMAGE: frozenset(
        {"jpg", "jpe", "jpeg", "png", "gif", "tif", "tiff", "webp", "dng", "xcf", "psd"}
    ),
}


@dataclass(frozen=True)
class RawChild:
    """One item reported by a directory listing primitive."""

    name: str
    is_dir: bool
    mode: int = 0


@dataclass(frozen=True)
class ScannedChild:
    """One classified listing item."""

    name: str
    kind: EntryKind


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one directory scan: ordered children or an error."""

    path: Path
    children: tuple[ScannedChild, ...] = ()
    error: ScanError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, path: Path, exc: BaseException) -> ScanResult:
        return cls(path=path, error=ScanError.from_exception(path, exc))


ListChildren = Callable[[Path], list[RawChild]]


def list_directory(directory: Path) -> list[RawChild]:
    """List ``directory`` with ``os.scandir``, sorted by name.

    Raises ``OSError`` when the directory cannot be read. Per-item stat
    failures only lose the permission bits.
    """
    children: list[RawChild] = []
    with os.scandir(directory) as entries:
        for child in entries:
            try:
                is_dir = child.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            try:
                mode = stat.S_IMODE(child.stat(follow_symlinks=False).st_mode)
            except OSError:
                mode = 0
            children.append(RawChild(name=child.name, is_dir=is_dir, mode=mode))
    children.sort(key=lambda item: item.name)
    return children


def extension_kind(name: str) -> EntryKind:
    """Return the media kind for ``name``'s extension, else ``GENERIC``."""
    _stem, dot, ext = name.rpartition(".")
    if not dot:
        return EntryKind.GENERIC
    ext = ext.lower()
    for kind, extensions in MEDIA_EXTENSIONS.items():
        if ext in extensions:
            return kind
    return EntryKind.GENERIC


def classify(name: str, is_dir: bool, mode: int = 0) -> EntryKind:
    """Classify a listed item as directory, executable, media or generic."""
    if is_dir:
        return EntryKind.DIRECTORY
    if mode & EXECUTABLE_BITS:
        return EntryKind.EXECUTABLE
    return extension_kind(name)


def order_children(children: list[ScannedChild]) -> list[ScannedChild]:
    """Stable-partition ``children`` so directories precede files.

    Ties keep listing order; this is deliberately not an alphabetic sort.
    """
    return sorted(children, key=lambda child: not child.kind.is_directory)


def scan_directory(
    directory: Path,
    *,
    show_hidden: bool = True,
    list_children: ListChildren = list_directory,
) -> ScanResult:
    """Perform one blocking listing of ``directory`` and classify its items."""
    try:
        raw_children = list_children(directory)
    except OSError as exc:
        logger.warning("scan of %s failed: %s", directory, exc)
        return ScanResult.failed(directory, exc)

    scanned: list[ScannedChild] = []
    for raw in raw_children:
        if not show_hidden and raw.name.startswith("."):
            continue
        scanned.append(ScannedChild(name=raw.name, kind=classify(raw.name, raw.is_dir, raw.mode)))

    ordered = order_children(scanned)
    logger.debug("scanned %s: %d children", directory, len(ordered))
    return ScanResult(path=directory, children=tuple(ordered))


__all__ = [
    "EXECUTABLE_BITS",
    "MEDIA_EXTENSIONS",
    "RawChild",
    "ScannedChild",
    "ScanResult",
    "ListChildren",
    "list_directory",
    "extension_kind",
    "classify",
    "order_children",
    "scan_directory",
]
