"""Command-line front door for treesync.

Loads a directory tree through the synchronizer, optionally expands, marks and
resolves paths, then prints the rendered tree.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import config
from .logging_setup import configure_logging
from .model.types import DirectoryEntry, DirLifecycle, Entry
from .presentation.rendering import render_rows
from .presentation.rows import RowModel
from .runtime.scheduler import ScanScheduler, ThreadedScanScheduler
from .runtime.synchronizer import TreeSynchronizer
from .ui_theme import available_theme_names, resolve_theme

SETTLE_TIMEOUT_SECONDS = 30.0


def _settle(scheduler: ScanScheduler, timeout_seconds: float = SETTLE_TIMEOUT_SECONDS) -> None:
    """Pump scan results on this thread until no scan is outstanding."""
    if not scheduler.run_until_idle(timeout_seconds):
        raise SystemExit(f"Timed out after {timeout_seconds:.0f}s waiting for directory scans.")


def expand_all(tree: TreeSynchronizer, scheduler: ScanScheduler, timeout_seconds: float = SETTLE_TIMEOUT_SECONDS) -> None:
    """Load every directory reachable from the root.

    Directories whose last scan failed are not retried, so unreadable
    subtrees cannot keep the loop alive.
    """
    while True:
        pending = [
            entry
            for entry in tree.arena.iter_entries()
            if isinstance(entry, DirectoryEntry)
            and entry.lifecycle is DirLifecycle.UNINITIALIZED
            and entry.last_error is None
        ]
        if not pending:
            return
        for directory in pending:
            tree.coalescer.init(directory)
        _settle(scheduler, timeout_seconds)


def describe_entry(tree: TreeSynchronizer, entry: Entry) -> str:
    """Return a one-line ``kind<TAB>relative path`` description of ``entry``."""
    relative = tree.relative_path(entry.path)
    line = f"{entry.kind.value}\t{relative}"
    if isinstance(entry, DirectoryEntry) and entry.dirty_count:
        line += f"\tunsaved={entry.dirty_count}"
    elif not isinstance(entry, DirectoryEntry) and entry.unsaved:
        line += "\tunsaved"
    return line


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lazily load and print a directory tree.")
    parser.add_argument("path", nargs="?", default=None, help="Root directory. Defaults to current directory.")
    parser.add_argument("--last", action="store_true", help="Load the root used last time.")
    parser.add_argument(
        "--expand",
        metavar="REL",
        action="append",
        default=[],
        help="Expand a directory (relative to root or absolute). Repeatable.",
    )
    parser.add_argument("--all", action="store_true", help="Expand every directory.")
    parser.add_argument(
        "--unsaved",
        metavar="REL",
        action="append",
        default=[],
        help="Mark a file as unsaved. Repeatable.",
    )
    parser.add_argument("--resolve", metavar="REL", help="Print the entry at REL and exit (status 1 if missing).")
    hidden = parser.add_mutually_exclusive_group()
    hidden.add_argument("--show-hidden", dest="show_hidden", action="store_true", default=None)
    hidden.add_argument("--hide-hidden", dest="show_hidden", action="store_false")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...).")
    return parser


def _root_from_args(args: argparse.Namespace) -> Path:
    if args.path is not None and args.last:
        raise SystemExit("Cannot combine positional path with --last.")
    if args.last:
        last_root = config.load_last_root()
        if last_root is None:
            raise SystemExit("No previously loaded root.")
        return last_root
    return Path(args.path).expanduser() if args.path is not None else Path.cwd()


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, load the tree, and print it (or a resolved entry)."""
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    root = _root_from_args(args).resolve()
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")

    show_hidden = config.load_show_hidden() if args.show_hidden is None else args.show_hidden
    no_color = args.no_color or not sys.stdout.isatty()
    theme = resolve_theme(args.theme or config.load_theme_name(), no_color=no_color)

    scheduler = ThreadedScanScheduler(max_workers=config.load_scan_workers())
    rows = RowModel()
    tree = TreeSynchronizer(rows, scheduler, show_hidden=show_hidden)
    try:
        tree.load(root)
        _settle(scheduler)
        config.save_last_root(root)

        if args.resolve is not None:
            found: list[Entry | None] = [None]
            tree.resolver.resolve_entry(args.resolve, lambda entry: found.__setitem__(0, entry))
            _settle(scheduler)
            if found[0] is None:
                raise SystemExit(1)
            sys.stdout.write(describe_entry(tree, found[0]) + "\n")
            return

        expanded: set[Path] = {root}

        def reveal(directory: DirectoryEntry | None) -> None:
            if directory is None:
                return
            expanded.add(directory.path)
            expanded.update(ancestor.path for ancestor in tree.arena.ancestors(directory))

        for target in args.expand:
            tree.expand(target, reveal)
        for target in args.unsaved:
            tree.set_unsaved(target, True)
        _settle(scheduler)
        if args.all:
            expand_all(tree, scheduler)

        lines = render_rows(rows, expanded=None if args.all else expanded, theme=theme)
        sys.stdout.write("\n".join(lines) + "\n")
    finally:
        scheduler.shutdown()


if __name__ == "__main__":
    main()
