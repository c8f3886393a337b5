"""Tests for per-directory refresh coalescing."""

from __future__ import annotations

import tempfile
import unittest
from collections import Counter
from pathlib import Path

from treesync.model.arena import EntryArena
from treesync.model.merge import destroy_entry
from treesync.model.scanner import RawChild, ScanResult, list_directory, scan_directory
from treesync.model.types import DirectoryEntry, DirLifecycle, RefreshState
from treesync.presentation.sink import RecordingSink
from treesync.runtime.coalescer import RefreshCoalescer
from treesync.runtime.scheduler import DeferredScanScheduler


class CountingLister:
    """Wrap ``list_directory`` and count calls per path."""

    def __init__(self) -> None:
        self.calls: Counter[Path] = Counter()
        self.failing: set[Path] = set()

    def __call__(self, directory: Path) -> list[RawChild]:
        self.calls[directory] += 1
        if directory in self.failing:
            raise PermissionError(13, "Permission denied", str(directory))
        return list_directory(directory)


class RefreshCoalescerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root_path = Path(self._tmp.name)
        (self.root_path / "b").mkdir()
        (self.root_path / "a.txt").write_text("a\n", encoding="utf-8")

        self.arena = EntryArena()
        self.sink = RecordingSink()
        self.scheduler = DeferredScanScheduler()
        self.lister = CountingLister()
        self.coalescer = RefreshCoalescer(
            self.arena,
            self.scheduler,
            self.sink,
            lambda path: scan_directory(path, list_children=self.lister),
        )
        self.root = self.arena.add_directory(self.root_path, parent_id=None)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_many_refreshes_share_one_scan(self) -> None:
        notified: list[int] = []

        for index in range(5):
            self.coalescer.refresh(self.root, lambda index=index: notified.append(index))

        self.assertEqual(self.scheduler.submitted, 1)
        self.assertEqual(notified, [])

        self.scheduler.run_until_idle()

        self.assertEqual(self.lister.calls[self.root_path], 1)
        self.assertEqual(sorted(notified), [0, 1, 2, 3, 4])
        self.assertIs(self.root.refresh_state, RefreshState.IDLE)
        self.assertEqual(self.root.waiters, [])

    def test_loading_directory_is_insensitive_until_scan_lands(self) -> None:
        self.coalescer.refresh(self.root)

        self.assertTrue(self.coalescer.is_loading(self.root))
        self.assertFalse(self.root.sensitive)
        self.assertIs(self.root.lifecycle, DirLifecycle.LOADING)

        self.scheduler.run_until_idle()

        self.assertTrue(self.root.sensitive)
        self.assertIs(self.root.lifecycle, DirLifecycle.READY)
        self.assertEqual(
            self.sink.of_type("sensitive"),
            [("sensitive", self.root_path, False), ("sensitive", self.root_path, True)],
        )

    def test_placeholder_is_removed_when_scan_starts(self) -> None:
        self.root.placeholder = "placeholder-1"

        self.coalescer.refresh(self.root)

        self.assertIsNone(self.root.placeholder)
        self.assertIn(("placeholder_removed", self.root_path, "placeholder-1"), self.sink.events)

    def test_init_of_ready_directory_does_not_scan(self) -> None:
        self.coalescer.init(self.root)
        self.scheduler.run_until_idle()
        calls: list[str] = []

        self.coalescer.init(self.root, lambda: calls.append("done"))

        self.assertEqual(calls, ["done"])
        self.assertEqual(self.scheduler.submitted, 1)

    def test_rescan_of_ready_directory_keeps_children_visible(self) -> None:
        self.coalescer.init(self.root)
        self.scheduler.run_until_idle()

        self.coalescer.refresh(self.root)

        self.assertIs(self.root.lifecycle, DirLifecycle.READY)
        self.assertEqual(sorted(self.root.children), ["a.txt", "b"])
        self.scheduler.run_until_idle()

    def test_result_for_destroyed_directory_is_discarded(self) -> None:
        self.coalescer.init(self.root)
        self.scheduler.run_until_idle()
        b = self.arena.child(self.root, "b")
        assert isinstance(b, DirectoryEntry)
        notified: list[str] = []

        self.coalescer.refresh(b, lambda: notified.append("b"))
        destroy_entry(self.arena, b.entry_id, self.sink)
        self.scheduler.run_until_idle()

        self.assertEqual(notified, ["b"])
        self.assertEqual(b.children, {})
        self.assertFalse(self.coalescer.busy)

    def test_refresh_of_detached_directory_only_notifies(self) -> None:
        orphan = DirectoryEntry(entry_id=999, path=self.root_path / "gone", parent_id=None)
        notified: list[str] = []

        self.coalescer.refresh(orphan, lambda: notified.append("x"))

        self.assertEqual(notified, ["x"])
        self.assertEqual(self.scheduler.submitted, 0)

    def test_scan_error_then_retry_succeeds(self) -> None:
        self.lister.failing.add(self.root_path)

        self.coalescer.refresh(self.root)
        self.scheduler.run_until_idle()

        self.assertIsNotNone(self.root.last_error)
        self.assertIs(self.root.lifecycle, DirLifecycle.UNINITIALIZED)
        self.assertEqual(len(self.sink.of_type("error")), 1)

        self.lister.failing.clear()
        self.coalescer.init(self.root)
        self.scheduler.run_until_idle()

        self.assertIsNone(self.root.last_error)
        self.assertIs(self.root.lifecycle, DirLifecycle.READY)
        self.assertEqual(self.lister.calls[self.root_path], 2)

    def test_unexpected_scan_exception_becomes_error_result(self) -> None:
        def explode(path: Path) -> ScanResult:
            raise RuntimeError("boom")

        coalescer = RefreshCoalescer(self.arena, self.scheduler, self.sink, explode)

        with self.assertLogs("treesync.runtime.coalescer", level="ERROR"):
            coalescer.refresh(self.root)
            self.scheduler.run_until_idle()

        self.assertIsNotNone(self.root.last_error)
        self.assertIs(self.root.refresh_state, RefreshState.IDLE)

    def test_failing_waiter_does_not_skip_the_others(self) -> None:
        notified: list[str] = []

        def broken() -> None:
            raise RuntimeError("waiter failed")

        self.coalescer.refresh(self.root, lambda: notified.append("first"))
        self.coalescer.refresh(self.root, broken)
        self.coalescer.refresh(self.root, lambda: notified.append("last"))

        with self.assertLogs("treesync.runtime.coalescer", level="ERROR"):
            self.scheduler.run_until_idle()

        self.assertEqual(sorted(notified), ["first", "last"])
        self.assertIs(self.root.lifecycle, DirLifecycle.READY)
        self.assertFalse(self.coalescer.busy)

    def test_busy_flag_follows_in_flight_scans(self) -> None:
        self.coalescer.init(self.root)
        self.scheduler.run_until_idle()
        b = self.arena.child(self.root, "b")
        assert isinstance(b, DirectoryEntry)

        self.coalescer.refresh(self.root)
        self.coalescer.refresh(b)
        self.assertTrue(self.coalescer.busy)
        self.assertEqual(self.coalescer.in_flight, 2)

        self.scheduler.run_next()
        self.assertTrue(self.coalescer.busy)
        self.scheduler.run_until_idle()

        self.assertFalse(self.coalescer.busy)
        self.assertEqual(
            self.sink.of_type("busy"),
            [("busy", True), ("busy", False), ("busy", True), ("busy", False)],
        )


if __name__ == "__main__":
    unittest.main()
