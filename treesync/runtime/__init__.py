"""Runtime pieces: scan scheduling, refresh coalescing, path resolution."""

from __future__ import annotations

from .scheduler import DeferredScanScheduler, InlineScanScheduler, ScanScheduler, ThreadedScanScheduler
from .coalescer import RefreshCoalescer
from .resolver import PathResolver
from .synchronizer import TreeSynchronizer

__all__ = [
    "ScanScheduler",
    "InlineScanScheduler",
    "DeferredScanScheduler",
    "ThreadedScanScheduler",
    "RefreshCoalescer",
    "PathResolver",
    "TreeSynchronizer",
]
