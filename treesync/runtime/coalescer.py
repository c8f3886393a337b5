"""Per-directory refresh state machine.

``IDLE --refresh--> LOADING`` submits exactly one scan. Further refreshes while
``LOADING`` only register a waiter on the in-flight scan. When the scan result
is delivered the directory is merged (or marked failed), returns to ``IDLE``
and every waiter is notified. At most one scan per directory is ever in flight.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..model.arena import EntryArena
from ..model.merge import apply_scan_error, merge_children
from ..model.scanner import ScanResult
from ..model.types import DirectoryEntry, DirLifecycle, RefreshState
from ..presentation.sink import PresentationSink
from .scheduler import ScanScheduler

logger = logging.getLogger(__name__)

ScanFn = Callable[[Path], ScanResult]
Done = Callable[[], object]


class RefreshCoalescer:
    """Coalesce concurrent refresh requests into one scan per directory."""

    def __init__(
        self,
        arena: EntryArena,
        scheduler: ScanScheduler,
        sink: PresentationSink,
        scan: ScanFn,
    ) -> None:
        self._arena = arena
        self._scheduler = scheduler
        self._sink = sink
        self._scan = scan
        self.in_flight = 0
        self.scan_count = 0

    @property
    def busy(self) -> bool:
        return self.in_flight > 0

    def is_loading(self, directory: DirectoryEntry) -> bool:
        return directory.refresh_state is RefreshState.LOADING

    def init(self, directory: DirectoryEntry, done: Done | None = None) -> None:
        """Load ``directory`` unless it is already ``READY``, then call ``done``."""
        if directory.lifecycle is DirLifecycle.READY and self._arena.contains(directory):
            if done is not None:
                done()
            return
        self.refresh(directory, done)

    def refresh(self, directory: DirectoryEntry, done: Done | None = None) -> None:
        """Rescan ``directory``; ``done`` runs once the (shared) scan completes."""
        if not self._arena.contains(directory):
            logger.debug("refresh of detached directory %s ignored", directory.path)
            if done is not None:
                done()
            return

        if directory.refresh_state is RefreshState.LOADING:
            logger.debug("refresh of %s joins in-flight scan", directory.path)
            if done is not None:
                directory.waiters.append(done)
            return

        directory.refresh_state = RefreshState.LOADING
        if directory.lifecycle is not DirLifecycle.READY:
            # A rescan of a loaded directory keeps serving its current children.
            directory.lifecycle = DirLifecycle.LOADING
        if done is not None:
            directory.waiters.append(done)
        self._set_sensitive(directory, False)
        if directory.placeholder is not None:
            self._sink.placeholder_removed(directory, directory.placeholder)
            directory.placeholder = None

        self.scan_count += 1
        self._track(1)
        path = directory.path
        logger.debug("scanning %s", path)
        self._scheduler.submit(
            lambda: self._run_scan(path),
            lambda result: self._complete(directory, result),
        )

    def _run_scan(self, path: Path) -> ScanResult:
        # Runs off the interactive thread.
        try:
            return self._scan(path)
        except Exception as exc:
            logger.exception("unexpected failure scanning %s", path)
            return ScanResult.failed(path, exc)

    def _complete(self, directory: DirectoryEntry, result: ScanResult) -> None:
        waiters = directory.waiters
        directory.waiters = []
        directory.refresh_state = RefreshState.IDLE

        if self._arena.contains(directory):
            if result.error is None:
                merge_children(self._arena, directory, result.children, self._sink)
            else:
                apply_scan_error(self._arena, directory, result.error.message, self._sink)
            self._set_sensitive(directory, True)
        else:
            logger.debug("discarding scan result for destroyed directory %s", directory.path)

        self._track(-1)
        for waiter in waiters:
            try:
                waiter()
            except Exception:
                logger.exception("refresh waiter for %s failed", directory.path)

    def _set_sensitive(self, directory: DirectoryEntry, sensitive: bool) -> None:
        directory.sensitive = sensitive
        self._sink.sensitivity_changed(directory, sensitive)

    def _track(self, delta: int) -> None:
        was_busy = self.busy
        self.in_flight += delta
        if self.busy != was_busy:
            self._sink.busy_changed(self.busy)


__all__ = ["RefreshCoalescer", "ScanFn", "Done"]
