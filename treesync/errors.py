"""Exception taxonomy for tree synchronization.

Scan failures are carried as values inside scan results and rendered as error
rows; they never escape ``refresh``. The remaining errors signal caller misuse.
"""

from __future__ import annotations

from pathlib import Path


class TreeSyncError(Exception):
    """Base class for all treesync errors."""


class NotAbsolutePathError(TreeSyncError, ValueError):
    """Raised when a tree root is loaded from a relative path."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"load not given an absolute path: {path}")
        self.path = path


class UnknownEntryError(TreeSyncError, KeyError):
    """Raised when an entry id is not (or no longer) present in the arena."""

    def __init__(self, entry_id: int) -> None:
        super().__init__(entry_id)
        self.entry_id = entry_id

    def __str__(self) -> str:
        return f"unknown entry id: {self.entry_id}"


class ScanError(TreeSyncError):
    """A directory could not be listed (permission, missing, not a directory)."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message

    @classmethod
    def from_exception(cls, path: Path, exc: BaseException) -> ScanError:
        """Build a scan error whose message is the OS error text verbatim."""
        if isinstance(exc, OSError) and exc.strerror:
            target = exc.filename if exc.filename is not None else path
            message = f"{exc.strerror}: {target}"
        else:
            message = str(exc) or exc.__class__.__name__
        return cls(path, message)


__all__ = [
    "TreeSyncError",
    "NotAbsolutePathError",
    "UnknownEntryError",
    "ScanError",
]
