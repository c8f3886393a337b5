"""ANSI palettes for the text rendering of the file tree.

Themes only colour rows; they never change which rows are shown.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the tree renderer."""

    name: str
    reset: str
    dim: str
    tree_marker: str
    tree_dir: str
    tree_file_default: str
    tree_file_executable: str
    tree_file_media: str
    tree_unsaved: str
    tree_error: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    dim="\033[2m",
    tree_marker="\033[38;5;44m",
    tree_dir="\033[1;34m",
    tree_file_default="\033[38;5;252m",
    tree_file_executable="\033[38;5;114m",
    tree_file_media="\033[38;5;176m",
    tree_unsaved="\033[38;5;214m",
    tree_error="\033[1;31m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    dim="\033[2;38;5;110m",
    tree_marker="\033[38;5;39m",
    tree_dir="\033[1;38;5;45m",
    tree_file_default="\033[38;5;252m",
    tree_file_executable="\033[38;5;84m",
    tree_file_media="\033[38;5;153m",
    tree_unsaved="\033[38;5;215m",
    tree_error="\033[1;38;5;203m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    dim="",
    tree_marker="",
    tree_dir="",
    tree_file_default="",
    tree_file_executable="",
    tree_file_media="",
    tree_unsaved="",
    tree_error="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
