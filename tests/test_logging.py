import logging
import logging.handlers
import tempfile
import unittest
from pathlib import Path

from place_autocomplete.config.models import FileLoggingSettings, LoggingSettings
from place_autocomplete.logging import init_logging


class InitLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = logging.getLogger()
        self._saved_level = root.level
        self._saved_handlers = list(root.handlers)

    def tearDown(self) -> None:
        init_logging(LoggingSettings(level="WARNING", file=FileLoggingSettings(path="")))
        root = logging.getLogger()
        for handler in list(root.handlers):
            if handler not in self._saved_handlers:
                root.removeHandler(handler)
                handler.close()
        root.setLevel(self._saved_level)
        self._tmp.cleanup()

    def test_file_handler_rotates_daily(self) -> None:
        log_path = Path(self._tmp.name) / "logs" / "app.log"
        init_logging(LoggingSettings(level="debug", file=FileLoggingSettings(path=str(log_path))))

        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        rotating = [h for h in root.handlers if isinstance(h, logging.handlers.TimedRotatingFileHandler)]
        self.assertEqual(len(rotating), 1)
        self.assertEqual(rotating[0].backupCount, 5)

        logging.getLogger("place_autocomplete.test").info("written")
        rotating[0].flush()
        self.assertIn("written", log_path.read_text(encoding="utf-8"))

    def test_repeated_init_does_not_duplicate_handlers(self) -> None:
        settings = LoggingSettings(file=FileLoggingSettings(path=""))
        init_logging(settings)
        count = len(logging.getLogger().handlers)
        init_logging(settings)
        self.assertEqual(len(logging.getLogger().handlers), count)

    def test_unknown_level_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            init_logging(LoggingSettings(level="LOUD", file=FileLoggingSettings(path="")))


if __name__ == "__main__":
    unittest.main()
