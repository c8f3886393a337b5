"""Text rendering of ``RowModel`` rows (used by the CLI)."""

from __future__ import annotations

from pathlib import Path

from ..model.types import EntryKind
from ..ui_theme import DEFAULT_THEME, UITheme
from .rows import Row, RowModel


def file_color_for(kind: EntryKind | None, theme: UITheme | None = None) -> str:
    """Return ANSI color used for file names based on kind."""
    active_theme = theme or DEFAULT_THEME
    if kind is EntryKind.EXECUTABLE:
        return active_theme.tree_file_executable
    if kind is not None and kind.is_media:
        return active_theme.tree_file_media
    return active_theme.tree_file_default


def format_row(row: Row, depth: int, expanded: bool, theme: UITheme | None = None) -> str:
    """Render one row as ANSI-styled display text."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    indent = "  " * depth
    unsaved = f" {active_theme.tree_unsaved}{row.unsaved}{reset}" if row.unsaved else ""

    if row.is_error:
        return f"{indent}  {active_theme.tree_error}{row.label}{reset}"
    if row.is_placeholder:
        return f"{indent}  {active_theme.dim}…{reset}"

    dim = "" if row.sensitive else active_theme.dim
    if row.is_dir:
        marker = "▾ " if expanded else "▸ "
        name = f"{row.label}/"
        return f"{indent}{active_theme.tree_marker}{marker}{reset}{dim}{active_theme.tree_dir}{name}{reset}{unsaved}"

    color = file_color_for(row.kind, active_theme)
    return f"{indent}  {dim}{color}{row.label}{reset}{unsaved}"


def render_rows(
    model: RowModel,
    expanded: set[Path] | None = None,
    theme: UITheme | None = None,
) -> list[str]:
    """Render the row tree depth-first.

    ``expanded`` lists directory paths whose children are shown; ``None``
    shows every loaded directory. The root is always expanded.
    """
    lines: list[str] = []
    if model.root_handle is None:
        return lines

    def visit(handle: int, depth: int) -> None:
        row = model.rows[handle]
        is_root = handle == model.root_handle
        open_dir = row.is_dir and (
            is_root or expanded is None or (row.path is not None and row.path in expanded)
        )
        lines.append(format_row(row, depth, open_dir, theme))
        if not open_dir:
            return
        for child in model.child_rows(handle):
            if child.is_placeholder and expanded is None:
                continue
            visit(child.handle, depth + 1)

    visit(model.root_handle, 0)
    return lines


__all__ = ["file_color_for", "format_row", "render_rows"]
