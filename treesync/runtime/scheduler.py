"""Schedulers that run blocking scans and deliver results on the caller's thread.

Every scheduler follows one contract: ``submit(job, deliver)`` runs ``job``
(possibly on a worker thread) and later calls ``deliver(result)`` on the
interactive thread. Tree mutations only ever happen inside ``deliver``.

Jobs must report failures through their result value instead of raising
(``RefreshCoalescer`` wraps scans this way). A job that raises anyway is
logged and its ``deliver`` is never called.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from queue import Empty, Queue
from typing import Any

logger = logging.getLogger(__name__)

Job = Callable[[], Any]
Deliver = Callable[[Any], None]


class ScanScheduler:
    """Base scheduler interface."""

    def submit(self, job: Job, deliver: Deliver) -> None:
        raise NotImplementedError

    @property
    def pending(self) -> int:
        """Number of submitted jobs whose result has not been delivered yet."""
        raise NotImplementedError

    def run_until_idle(self, timeout_seconds: float | None = None) -> bool:
        """Process work until nothing is pending; return whether that happened."""
        raise NotImplementedError

    def shutdown(self) -> None:
        """Release worker resources; pending results may be dropped."""


class InlineScanScheduler(ScanScheduler):
    """Run the job and deliver its result synchronously inside ``submit``."""

    def submit(self, job: Job, deliver: Deliver) -> None:
        deliver(job())

    @property
    def pending(self) -> int:
        return 0

    def run_until_idle(self, timeout_seconds: float | None = None) -> bool:
        return True


class DeferredScanScheduler(ScanScheduler):
    """Queue jobs and run them only when the owner pumps the scheduler.

    Useful for embedding in an existing event loop and for deterministic tests:
    every scan stays "in flight" until ``run_next``/``run_pending`` is called.
    """

    def __init__(self) -> None:
        self._queue: deque[tuple[Job, Deliver]] = deque()
        self.submitted = 0

    def submit(self, job: Job, deliver: Deliver) -> None:
        self.submitted += 1
        self._queue.append((job, deliver))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_next(self) -> bool:
        """Run the oldest queued job and deliver its result."""
        if not self._queue:
            return False
        job, deliver = self._queue.popleft()
        deliver(job())
        return True

    def run_pending(self) -> int:
        """Run the jobs queued right now; work they submit stays queued."""
        count = 0
        for _ in range(len(self._queue)):
            if not self.run_next():
                break
            count += 1
        return count

    def run_until_idle(self, timeout_seconds: float | None = None) -> bool:
        while self.run_next():
            pass
        return True


class ThreadedScanScheduler(ScanScheduler):
    """Run jobs on a thread pool; results queue up until ``drain_results``.

    ``drain_results`` must be called from the interactive thread (e.g. from an
    idle/timer callback of the host event loop).
    """

    def __init__(self, max_workers: int = 4, thread_name_prefix: str = "treesync-scan") -> None:
        self._executor = ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix=thread_name_prefix)
        self._results: Queue[tuple[Deliver, Any]] = Queue()
        self._lock = threading.Lock()
        self._pending = 0

    def submit(self, job: Job, deliver: Deliver) -> None:
        with self._lock:
            self._pending += 1
        future = self._executor.submit(job)
        future.add_done_callback(lambda done: self._collect(done, deliver))

    def _collect(self, future: Future, deliver: Deliver) -> None:
        if future.cancelled():
            with self._lock:
                self._pending -= 1
            return
        try:
            result = future.result()
        except Exception:
            logger.exception("background scan job failed")
            with self._lock:
                self._pending -= 1
            return
        self._results.put((deliver, result))

    @property
    def pending(self) -> int:
        with self._lock:
            return self._pending

    def _deliver(self, deliver: Deliver, result: Any) -> None:
        with self._lock:
            self._pending -= 1
        deliver(result)

    def drain_results(self) -> int:
        """Deliver every completed result; return how many were delivered."""
        delivered = 0
        while True:
            try:
                deliver, result = self._results.get_nowait()
            except Empty:
                break
            self._deliver(deliver, result)
            delivered += 1
        return delivered

    def wait_for_results(self, timeout_seconds: float) -> int:
        """Block up to ``timeout_seconds`` for one result, then drain all available."""
        try:
            deliver, result = self._results.get(timeout=max(0.0, timeout_seconds))
        except Empty:
            return 0
        self._deliver(deliver, result)
        return 1 + self.drain_results()

    def run_until_idle(self, timeout_seconds: float | None = None) -> bool:
        deadline = None if timeout_seconds is None else time.monotonic() + timeout_seconds
        while self.pending > 0:
            remaining = 0.05 if deadline is None else min(0.05, deadline - time.monotonic())
            if remaining <= 0:
                return False
            self.wait_for_results(remaining)
        return True

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = [
    "ScanScheduler",
    "InlineScanScheduler",
    "DeferredScanScheduler",
    "ThreadedScanScheduler",
]
