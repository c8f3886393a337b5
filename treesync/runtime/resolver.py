"""Path resolution through the entry tree with lazy directory loading.

``resolve`` descends component by component. When it meets a directory that is
not loaded yet it initializes it through the refresh coalescer and resumes at
the same component once the scan lands, instead of restarting from the root.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import PurePath

from ..model.arena import EntryArena
from ..model.types import DirectoryEntry, DirLifecycle, Entry, RefreshState
from .coalescer import RefreshCoalescer

logger = logging.getLogger(__name__)

# Returning ``False`` from a visitor stops the walk; any other value continues.
Visit = Callable[[Entry | None], object]
Finish = Callable[[Entry | None], object]

_SEPARATORS = {"/", os.sep} | ({os.altsep} if os.altsep else set())


def split_components(path: str) -> list[str]:
    """Split a relative path on any separator, dropping empty and ``.`` parts."""
    parts = [path]
    for separator in _SEPARATORS:
        parts = [piece for part in parts for piece in part.split(separator)]
    return [part for part in parts if part not in ("", ".")]


class PathResolver:
    """Resolve absolute or root-relative paths into entries of one tree."""

    def __init__(self, arena: EntryArena, root: DirectoryEntry, coalescer: RefreshCoalescer) -> None:
        self._arena = arena
        self._root = root
        self._coalescer = coalescer

    @property
    def root(self) -> DirectoryEntry:
        return self._root

    def relative_parts(self, path: str | PurePath) -> list[str] | None:
        """Return path components relative to the root, ``None`` if outside it."""
        text = os.fspath(path)
        if os.path.isabs(text):
            try:
                relative = PurePath(os.path.normpath(text)).relative_to(self._root.path)
            except ValueError:
                return None
            return list(relative.parts)
        return split_components(text)

    def relative_path_of(self, entry: Entry) -> str:
        """Return ``entry``'s slash-separated path relative to the root."""
        if entry is self._root:
            return ""
        return entry.path.relative_to(self._root.path).as_posix()

    def resolve(self, path: str | PurePath, visit: Visit) -> None:
        """Resolve ``path``, loading directories on the way as needed.

        ``visit`` is called for each intermediate directory and finally once
        with the terminal entry, or with ``None`` when the path cannot be
        resolved. Resolution may complete later, after background scans.
        """
        self._start(path, visit, visit, lazy=True)

    def resolve_entry(self, path: str | PurePath, done: Finish) -> None:
        """Resolve ``path`` lazily and call ``done`` once with the result only."""
        self._start(path, None, done, lazy=True)

    def walk(self, path: str | PurePath, visit: Visit) -> None:
        """Like ``resolve`` but never schedules scans; unloaded directories miss."""
        self._start(path, visit, visit, lazy=False)

    def entry(self, path: str | PurePath) -> Entry | None:
        """Return the already-loaded entry at ``path`` or ``None``."""
        found: list[Entry | None] = [None]

        def remember(entry: Entry | None) -> bool:
            found[0] = entry
            return True

        self.walk(path, remember)
        return found[0]

    def _start(self, path: str | PurePath, step: Visit | None, finish: Finish, *, lazy: bool) -> None:
        parts = self.relative_parts(path)
        if parts is None:
            logger.debug("path %s is outside root %s", path, self._root.path)
            finish(None)
            return
        if not parts:
            finish(self._root)
            return
        self._walk(self._root, parts, 0, step, finish, lazy)

    def _walk(
        self,
        directory: DirectoryEntry,
        parts: list[str],
        index: int,
        step: Visit | None,
        finish: Finish,
        lazy: bool,
    ) -> None:
        while index < len(parts):
            if not self._arena.contains(directory):
                finish(None)
                return

            if directory.lifecycle is not DirLifecycle.READY:
                if not lazy:
                    finish(None)
                    return
                self._coalescer.init(directory, lambda: self._resume(directory, parts, index, step, finish))
                return

            entry = self._arena.child(directory, parts[index])
            if entry is None:
                logger.debug("no entry %r in %s", parts[index], directory.path)
                finish(None)
                return

            if index == len(parts) - 1:
                finish(entry)
                return

            if not isinstance(entry, DirectoryEntry):
                # A file where a directory was expected.
                finish(None)
                return

            if step is not None and step(entry) is False:
                return
            directory = entry
            index += 1

    def _resume(
        self,
        directory: DirectoryEntry,
        parts: list[str],
        index: int,
        step: Visit | None,
        finish: Finish,
    ) -> None:
        if not self._arena.contains(directory):
            logger.debug("%s was destroyed while resolving %s", directory.path, "/".join(parts))
            finish(None)
            return
        if directory.lifecycle is DirLifecycle.READY:
            # A rescan may already be running again; its current children still serve.
            self._walk(directory, parts, index, step, finish, lazy=True)
            return
        if directory.refresh_state is RefreshState.LOADING:
            # A first load restarted before we were notified; join that scan.
            self._coalescer.refresh(directory, lambda: self._resume(directory, parts, index, step, finish))
            return
        logger.debug("could not load %s while resolving %s", directory.path, "/".join(parts))
        finish(None)


__all__ = ["PathResolver", "Visit", "Finish", "split_components"]
