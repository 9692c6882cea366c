import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from ui.logging_utils import setup_logging


class TestSetupLogging(unittest.TestCase):
    def setUp(self) -> None:
        self.root = logging.getLogger()
        self.saved_handlers = list(self.root.handlers)
        self.saved_level = self.root.level
        for handler in self.saved_handlers:
            self.root.removeHandler(handler)
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self) -> None:
        for handler in list(self.root.handlers):
            self.root.removeHandler(handler)
            handler.close()
        for handler in self.saved_handlers:
            self.root.addHandler(handler)
        self.root.setLevel(self.saved_level)
        self.tmp.cleanup()

    def test_file_handler_then_console(self):
        log_file = Path(self.tmp.name) / "logs" / "studysearch.log"
        with mock.patch.dict(os.environ, {"STUDYSEARCH_LOG_FILE": str(log_file), "STUDYSEARCH_LOG_LEVEL": "debug"}):
            setup_logging()
        handlers = self.root.handlers
        self.assertEqual(len(handlers), 2)
        self.assertIsInstance(handlers[0], logging.FileHandler)
        self.assertIs(type(handlers[1]), logging.StreamHandler)
        self.assertEqual(self.root.level, logging.DEBUG)
        self.assertTrue(log_file.parent.is_dir())

    def test_empty_log_file_keeps_console_only(self):
        with mock.patch.dict(os.environ, {"STUDYSEARCH_LOG_FILE": ""}):
            setup_logging()
        self.assertEqual([type(handler) for handler in self.root.handlers], [logging.StreamHandler])

    def test_second_call_is_a_no_op(self):
        with mock.patch.dict(os.environ, {"STUDYSEARCH_LOG_FILE": ""}):
            setup_logging()
            setup_logging()
        self.assertEqual(len(self.root.handlers), 1)


if __name__ == "__main__":
    unittest.main()
