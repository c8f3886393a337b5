"""CLI argument and output behavior tests.

Runs ``treesync.cli.main`` against real temporary trees with stdout captured
(not a TTY, so output is uncolored).
"""

from __future__ import annotations

import io
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from treesync import cli, config


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        base = Path(os.path.realpath(self._tmp.name))
        self.root = base / "project"
        (self.root / "b").mkdir(parents=True)
        (self.root / "b" / "c.txt").write_text("c\n", encoding="utf-8")
        (self.root / "a.txt").write_text("a\n", encoding="utf-8")
        (self.root / ".hidden").write_text("h\n", encoding="utf-8")

        config_patch = mock.patch("treesync.config.CONFIG_PATH", base / "config" / "treesync.json")
        config_patch.start()
        self.addCleanup(config_patch.stop)
        logging_patch = mock.patch("treesync.cli.configure_logging")
        logging_patch.start()
        self.addCleanup(logging_patch.stop)

    def _run(self, *argv: str) -> list[str]:
        stdout = io.StringIO()
        with mock.patch.object(sys, "stdout", stdout):
            cli.main(list(argv))
        return stdout.getvalue().splitlines()

    def test_prints_root_listing_with_collapsed_directories(self) -> None:
        lines = self._run(str(self.root))

        self.assertEqual(lines, ["▾ project/", "  ▸ b/", "    .hidden", "    a.txt"])

    def test_hide_hidden_skips_dotfiles(self) -> None:
        lines = self._run(str(self.root), "--hide-hidden")

        self.assertEqual(lines, ["▾ project/", "  ▸ b/", "    a.txt"])

    def test_expand_and_unsaved_marks(self) -> None:
        lines = self._run(str(self.root), "--hide-hidden", "--expand", "b", "--unsaved", "b/c.txt")

        self.assertEqual(lines, ["▾ project/ ●", "  ▾ b/ ●", "      c.txt ●", "    a.txt"])

    def test_resolve_prints_kind_and_relative_path(self) -> None:
        self.assertEqual(self._run(str(self.root), "--resolve", "b/c.txt"), ["generic\tb/c.txt"])
        self.assertEqual(
            self._run(str(self.root), "--resolve", str(self.root / "b")),
            ["directory\tb"],
        )

    def test_resolve_missing_exits_with_status_one(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            self._run(str(self.root), "--resolve", "b/nope.txt")

        self.assertEqual(raised.exception.code, 1)

    def test_last_reuses_previous_root(self) -> None:
        self._run(str(self.root))

        self.assertEqual(config.load_last_root(), self.root)
        self.assertEqual(self._run("--last", "--hide-hidden"), ["▾ project/", "  ▸ b/", "    a.txt"])

    def test_last_without_history_fails(self) -> None:
        with self.assertRaises(SystemExit):
            self._run("--last")

    def test_all_expands_every_directory(self) -> None:
        (self.root / "b" / "d").mkdir()
        (self.root / "b" / "d" / "e.txt").write_text("e\n", encoding="utf-8")

        lines = self._run(str(self.root), "--hide-hidden", "--all")

        self.assertEqual(
            lines,
            ["▾ project/", "  ▾ b/", "    ▾ d/", "        e.txt", "      c.txt", "    a.txt"],
        )

    def test_rejects_non_directory_root(self) -> None:
        with self.assertRaises(SystemExit):
            self._run(str(self.root / "a.txt"))

    def test_show_hidden_preference_comes_from_config(self) -> None:
        config.save_show_hidden(False)

        self.assertEqual(self._run(str(self.root)), ["▾ project/", "  ▸ b/", "    a.txt"])
        self.assertEqual(self._run(str(self.root), "--show-hidden")[2], "    .hidden")


if __name__ == "__main__":
    unittest.main()
