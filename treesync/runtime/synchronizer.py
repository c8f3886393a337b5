"""Public tree synchronizer used by the file-browser layer.

Wires the entry arena, scanner, refresh coalescer, path resolver and unsaved
propagation together behind ``load``/``refresh``/``resolve_path``/
``set_unsaved``/``relative_path``. All methods must be called from the
interactive thread; scans run through the configured scheduler.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path, PurePath

from ..errors import NotAbsolutePathError
from ..model.arena import EntryArena
from ..model.merge import destroy_entry
from ..model.scanner import ListChildren, ScanResult, list_directory, scan_directory
from ..model.types import DirectoryEntry, DirLifecycle, Entry, FileEntry
from ..model.unsaved import set_entry_unsaved
from ..presentation.sink import PresentationSink
from .coalescer import Done, RefreshCoalescer
from .resolver import PathResolver, Visit
from .scheduler import InlineScanScheduler, ScanScheduler

logger = logging.getLogger(__name__)

DirectoryRef = DirectoryEntry | int | str | PurePath | None


class TreeSynchronizer:
    """Lazily loaded, incrementally refreshed directory tree."""

    def __init__(
        self,
        sink: PresentationSink | None = None,
        scheduler: ScanScheduler | None = None,
        *,
        show_hidden: bool = True,
        list_children: ListChildren = list_directory,
    ) -> None:
        self.sink = sink if sink is not None else PresentationSink()
        self.scheduler = scheduler if scheduler is not None else InlineScanScheduler()
        self.show_hidden = show_hidden
        self._list_children = list_children
        self.arena = EntryArena()
        self._root: DirectoryEntry | None = None
        self.coalescer = RefreshCoalescer(self.arena, self.scheduler, self.sink, self.scan)
        self._resolver: PathResolver | None = None

    # -- state ---------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self._root is not None

    @property
    def root(self) -> DirectoryEntry:
        if self._root is None:
            raise RuntimeError("no tree loaded")
        return self._root

    @property
    def root_path(self) -> Path:
        return self.root.path

    @property
    def resolver(self) -> PathResolver:
        if self._resolver is None:
            raise RuntimeError("no tree loaded")
        return self._resolver

    @property
    def busy(self) -> bool:
        return self.coalescer.busy

    def scan(self, directory: Path) -> ScanResult:
        """Blocking scan honoring the hidden-file preference (worker thread)."""
        return scan_directory(directory, show_hidden=self.show_hidden, list_children=self._list_children)

    # -- operations ----------------------------------------------------------

    def load(self, root_path: str | PurePath, done: Done | None = None) -> DirectoryEntry:
        """Replace the tree with a new one rooted at ``root_path`` and load it."""
        text = os.fspath(root_path)
        if not os.path.isabs(text):
            raise NotAbsolutePathError(text)

        if self._root is not None:
            destroy_entry(self.arena, self._root.entry_id, self.sink)
            self.arena.clear()

        root = self.arena.add_directory(Path(os.path.normpath(text)), parent_id=None)
        root.handle = self.sink.entry_created(root, None, 0)
        root.placeholder = self.sink.placeholder_added(root)
        self._root = root
        self._resolver = PathResolver(self.arena, root, self.coalescer)
        logger.info("loading tree at %s", root.path)
        self.refresh(root, done)
        return root

    def refresh(self, directory: DirectoryRef = None, done: Done | None = None) -> None:
        """Rescan one directory (default: the root); ``done`` runs when it lands.

        A path is resolved lazily first, so refreshing a deep directory loads
        its ancestors on demand. Misses and files just call ``done``.
        """
        if directory is None:
            self.coalescer.refresh(self.root, done)
            return
        if isinstance(directory, DirectoryEntry):
            self.coalescer.refresh(directory, done)
            return
        if isinstance(directory, int):
            target = self.arena.directory(directory)
            if target is None:
                logger.debug("refresh of unknown directory id %s", directory)
                _call(done)
                return
            self.coalescer.refresh(target, done)
            return

        def on_resolved(entry: Entry | None) -> None:
            if isinstance(entry, DirectoryEntry):
                self.coalescer.refresh(entry, done)
            else:
                logger.debug("refresh target %s is not a loaded directory", directory)
                _call(done)

        self.resolver.resolve_entry(directory, on_resolved)

    def refresh_loaded(self, done: Done | None = None) -> None:
        """Refresh the root and every directory loaded so far, then call ``done`` once.

        Directories destroyed by an ancestor's refresh still report completion,
        so ``done`` always runs exactly once.
        """
        directories = [
            entry
            for entry in self.arena.iter_entries()
            if isinstance(entry, DirectoryEntry)
            and (entry is self.root or entry.lifecycle is not DirLifecycle.UNINITIALIZED)
        ]
        remaining = [len(directories)]

        def one_done() -> None:
            remaining[0] -= 1
            if remaining[0] == 0:
                _call(done)

        for directory in directories:
            self.coalescer.refresh(directory, one_done)

    def expand(self, path: str | PurePath, done: Callable[[DirectoryEntry | None], object] | None = None) -> None:
        """Resolve ``path`` to a directory and make sure it is loaded.

        ``done`` receives the loaded directory, or ``None`` when ``path`` is
        not a directory or its scan failed.
        """

        def on_resolved(entry: Entry | None) -> None:
            if not isinstance(entry, DirectoryEntry):
                if done is not None:
                    done(None)
                return

            def on_loaded() -> None:
                if done is not None:
                    done(entry if entry.is_ready else None)

            self.coalescer.init(entry, on_loaded)

        self.resolver.resolve_entry(path, on_resolved)

    def resolve_path(self, path: str | PurePath, visit: Visit) -> None:
        """Resolve ``path`` lazily; see ``PathResolver.resolve``."""
        self.resolver.resolve(path, visit)

    def walk_path(self, path: str | PurePath, visit: Visit) -> None:
        """Resolve ``path`` through already-loaded directories only."""
        self.resolver.walk(path, visit)

    def entry(self, path: str | PurePath) -> Entry | None:
        """Return the loaded entry at ``path`` without triggering scans."""
        return self.resolver.entry(path)

    def set_unsaved(
        self,
        path: str | PurePath,
        unsaved: bool,
        done: Callable[[bool], object] | None = None,
    ) -> None:
        """Mark the file at ``path`` unsaved (or saved) and update ancestor counts.

        The path is resolved lazily, so the mark is never lost because a
        directory was collapsed. ``done`` receives whether anything changed.
        """

        def on_resolved(entry: Entry | None) -> None:
            changed = False
            if isinstance(entry, FileEntry):
                changed = set_entry_unsaved(self.arena, entry, unsaved, self.sink)
            elif entry is None:
                logger.debug("cannot mark %s unsaved: not in tree", path)
            else:
                logger.debug("cannot mark directory %s unsaved", entry.path)
            if done is not None:
                done(changed)

        self.resolver.resolve_entry(path, on_resolved)

    def relative_path(self, path: str | PurePath) -> str:
        """Return ``path`` relative to the root, or unchanged when not under it."""
        text = os.fspath(path)
        if not os.path.isabs(text):
            return text
        parts = self.resolver.relative_parts(text)
        if parts is None:
            return text
        return "/".join(parts) if parts else "."

    def listing(self, directory: DirectoryRef = None) -> list[Entry]:
        """Return the loaded children of ``directory`` in display order."""
        if directory is None:
            target: Entry | None = self.root
        elif isinstance(directory, DirectoryEntry):
            target = directory
        elif isinstance(directory, int):
            target = self.arena.get(directory)
        else:
            target = self.entry(directory)
        if not isinstance(target, DirectoryEntry):
            return []
        # Child maps are rebuilt in listing order on every merge.
        return self.arena.children_of(target)


def _call(done: Callable[[], object] | None) -> None:
    if done is not None:
        done()


__all__ = ["TreeSynchronizer", "DirectoryRef"]
