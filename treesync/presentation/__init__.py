"""Presentation adapter: sink protocol, icons, row model and text rendering."""

from __future__ import annotations

from .sink import PresentationSink, RecordingSink
from .icons import UNSAVED_DOT, icon_for
from .rows import Row, RowModel
from .rendering import format_row, render_rows

__all__ = [
    "PresentationSink",
    "RecordingSink",
    "UNSAVED_DOT",
    "icon_for",
    "Row",
    "RowModel",
    "format_row",
    "render_rows",
]
