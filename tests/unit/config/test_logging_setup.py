"""Tests for CLI logging configuration."""

from __future__ import annotations

import io
import logging
import unittest

from treesync.logging_setup import configure_logging, parse_level


class ParseLevelTests(unittest.TestCase):
    def test_names_are_case_insensitive(self) -> None:
        self.assertEqual(parse_level("debug"), logging.DEBUG)
        self.assertEqual(parse_level(" Info "), logging.INFO)
        self.assertEqual(parse_level("warn"), logging.WARNING)

    def test_unknown_and_empty_fall_back_to_warning(self) -> None:
        self.assertEqual(parse_level("chatty"), logging.WARNING)
        self.assertEqual(parse_level(""), logging.WARNING)
        self.assertEqual(parse_level(None), logging.WARNING)
        self.assertEqual(parse_level(15), 15)


class ConfigureLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        logger = logging.getLogger("treesync")
        saved_handlers = list(logger.handlers)
        saved_level = logger.level
        saved_propagate = logger.propagate

        def restore() -> None:
            logger.handlers[:] = saved_handlers
            logger.setLevel(saved_level)
            logger.propagate = saved_propagate

        self.addCleanup(restore)
        logger.handlers[:] = []

    def test_installs_single_handler_and_updates_level(self) -> None:
        stream = io.StringIO()

        logger = configure_logging("INFO", stream=stream)
        configure_logging("DEBUG", stream=stream)

        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertFalse(logger.propagate)

    def test_module_loggers_write_through_the_handler(self) -> None:
        stream = io.StringIO()
        configure_logging("INFO", stream=stream)

        logging.getLogger("treesync.runtime.synchronizer").info("loading tree at %s", "/work")
        logging.getLogger("treesync.model.scanner").debug("hidden at INFO")

        output = stream.getvalue()
        self.assertIn("INFO | treesync.runtime.synchronizer | loading tree at /work", output)
        self.assertNotIn("hidden at INFO", output)


if __name__ == "__main__":
    unittest.main()
