"""Tests for the entry arena's id allocation and navigation helpers."""

from __future__ import annotations

import unittest
from pathlib import Path

from treesync.errors import UnknownEntryError
from treesync.model.arena import EntryArena
from treesync.model.types import DirectoryEntry, EntryKind, FileEntry


class EntryArenaTests(unittest.TestCase):
    def test_ids_are_never_reused(self) -> None:
        arena = EntryArena()
        first = arena.add_file(Path("/a"), EntryKind.GENERIC, None)
        arena.discard(first.entry_id)

        second = arena.add_file(Path("/a"), EntryKind.GENERIC, None)

        self.assertNotEqual(first.entry_id, second.entry_id)
        self.assertFalse(arena.contains(first))
        self.assertTrue(arena.contains(second))

    def test_add_dispatches_on_kind(self) -> None:
        arena = EntryArena()
        directory = arena.add(Path("/d"), EntryKind.DIRECTORY, None)
        media = arena.add(Path("/d/song.mp3"), EntryKind.MEDIA_AUDIO, directory.entry_id)

        self.assertIsInstance(directory, DirectoryEntry)
        self.assertIsInstance(media, FileEntry)
        self.assertIs(media.kind, EntryKind.MEDIA_AUDIO)

    def test_ancestors_walk_up_to_root(self) -> None:
        arena = EntryArena()
        root = arena.add_directory(Path("/r"), None)
        mid = arena.add_directory(Path("/r/m"), root.entry_id)
        leaf = arena.add_file(Path("/r/m/f"), EntryKind.GENERIC, mid.entry_id)

        self.assertEqual([entry.entry_id for entry in arena.ancestors(leaf)], [mid.entry_id, root.entry_id])
        self.assertEqual(list(arena.ancestors(root)), [])

    def test_require_raises_for_stale_ids(self) -> None:
        arena = EntryArena()
        entry = arena.add_file(Path("/a"), EntryKind.GENERIC, None)
        arena.discard(entry.entry_id)

        with self.assertRaises(UnknownEntryError):
            arena.require(entry.entry_id)
        with self.assertRaises(KeyError):
            arena.require(entry.entry_id)

    def test_directory_lookup_ignores_files(self) -> None:
        arena = EntryArena()
        entry = arena.add_file(Path("/a"), EntryKind.GENERIC, None)

        self.assertIsNone(arena.directory(entry.entry_id))
        self.assertIsNone(arena.directory(None))


if __name__ == "__main__":
    unittest.main()
