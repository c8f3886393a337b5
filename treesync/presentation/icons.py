"""Symbolic icon names for tree rows."""

from __future__ import annotations

from ..model.types import EntryKind

UNSAVED_DOT = "●"
ERROR_ICON = "dialog-error-symbolic"
LOADING_ICON = "content-loading-symbolic"

_KIND_ICONS: dict[EntryKind, str] = {
    EntryKind.DIRECTORY: "folder-symbolic",
    EntryKind.EXECUTABLE: "application-x-appliance-symbolic",
    EntryKind.MEDIA_AUDIO: "audio-x-generic-symbolic",
    EntryKind.MEDIA_VIDEO: "video-x-generic-symbolic",
    EntryKind.MEDIA_IMAGE: "image-x-generic-symbolic",
    EntryKind.GENERIC: "text-x-generic-symbolic",
}


def icon_for(kind: EntryKind) -> str:
    """Return the freedesktop icon name for an entry kind."""
    return _KIND_ICONS.get(kind, _KIND_ICONS[EntryKind.GENERIC])


__all__ = ["UNSAVED_DOT", "ERROR_ICON", "LOADING_ICON", "icon_for"]
