"""Persistent JSON config helpers.

Stores the hidden-file preference, UI theme, scan worker count and the last
loaded root. All access is defensive: malformed or missing config falls back
safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "treesync"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_SCAN_WORKERS = 4
MAX_SCAN_WORKERS = 32


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored to keep runtime behavior non-fatal when
    config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def load_show_hidden() -> bool:
    """Return persisted hidden-file visibility preference.

    Only explicit boolean values are accepted; anything else falls back to
    ``True`` (the file browser lists everything by default).
    """
    value = load_config().get("show_hidden")
    return value if isinstance(value, bool) else True


def save_show_hidden(show_hidden: bool) -> None:
    """Persist hidden-file visibility preference as a boolean."""
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


def load_scan_workers() -> int:
    """Return the background scan worker count clamped to ``[1, MAX_SCAN_WORKERS]``.

    Booleans and non-integers fall back to ``DEFAULT_SCAN_WORKERS``.
    """
    value = load_config().get("scan_workers")
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_SCAN_WORKERS
    return max(1, min(MAX_SCAN_WORKERS, value))


def load_last_root() -> Path | None:
    """Return the last loaded root when it is an absolute path string."""
    value = load_config().get("last_root")
    if not isinstance(value, str) or not value:
        return None
    path = Path(value)
    return path if path.is_absolute() else None


def save_last_root(root: Path) -> None:
    """Persist the last loaded root directory."""
    config = load_config()
    config["last_root"] = str(root)
    save_config(config)
