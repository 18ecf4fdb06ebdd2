import logging
import os
import tempfile
import unittest

from tests.helpers import PROJECT_ROOT  # noqa: F401

from utils import logger as log_mod


class TestLogLocation(unittest.TestCase):
    def test_default_log_file_is_under_the_home_directory(self):
        self.assertTrue(os.path.isabs(log_mod.LOG_FILE))
        self.assertTrue(log_mod.LOG_FILE.startswith(os.path.expanduser("~")))
        self.assertEqual(os.path.basename(log_mod.LOG_FILE), "playlist_extractor.log")


class TestSetupLogging(unittest.TestCase):
    def setUp(self):
        self.root = logging.getLogger()
        self.old_level = self.root.level
        self.old_handlers = list(self.root.handlers)

    def tearDown(self):
        for handler in list(self.root.handlers):
            if handler not in self.old_handlers:
                self.root.removeHandler(handler)
                handler.close()
        self.root.setLevel(self.old_level)

    def _own_handlers(self):
        return [h for h in self.root.handlers if getattr(h, "_playlist_extractor", False)]

    def test_creates_log_directory_and_writes_debug_records(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = os.path.join(tmp, "nested", "run.log")

            log_mod.setup_logging(log_file=log_file)
            logging.getLogger("spotify_api.client").debug("fetched page 1")
            for handler in self._own_handlers():
                handler.flush()

            with open(log_file, encoding="utf-8") as f:
                self.assertIn("fetched page 1", f.read())

            for handler in self._own_handlers():
                self.root.removeHandler(handler)
                handler.close()

    def test_repeated_setup_does_not_stack_handlers(self):
        log_mod.setup_logging(log_file="")
        log_mod.setup_logging(log_file="")

        self.assertEqual(len(self._own_handlers()), 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
