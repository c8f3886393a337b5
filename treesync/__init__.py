"""Public package surface for treesync.

Exports ``TreeSynchronizer`` and the presentation sink base, plus ``main`` for
programmatic CLI invocation. Most implementation lives in submodules.
"""

from __future__ import annotations

from .errors import NotAbsolutePathError, ScanError, TreeSyncError, UnknownEntryError
from .presentation.sink import PresentationSink
from .runtime.synchronizer import TreeSynchronizer


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "TreeSynchronizer",
    "PresentationSink",
    "TreeSyncError",
    "NotAbsolutePathError",
    "ScanError",
    "UnknownEntryError",
    "main",
]
