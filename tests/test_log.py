import logging
import unittest

from rich.logging import RichHandler

from catan_layout.log import LOGGER_NAME, configure_logging


class ConfigureLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.logger = logging.getLogger(LOGGER_NAME)
        self._saved = (list(self.logger.handlers), self.logger.level, self.logger.propagate)

    def tearDown(self) -> None:
        handlers, level, propagate = self._saved
        self.logger.handlers = handlers
        self.logger.setLevel(level)
        self.logger.propagate = propagate

    def test_default_level_shows_warnings_only(self) -> None:
        logger = configure_logging()
        self.assertEqual(logger.level, logging.WARNING)

    def test_verbose_enables_debug(self) -> None:
        logger = configure_logging(verbose=True)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_repeated_setup_keeps_one_handler(self) -> None:
        configure_logging()
        logger = configure_logging()
        rich_handlers = [handler for handler in logger.handlers if isinstance(handler, RichHandler)]
        self.assertEqual(len(rich_handlers), 1)


if __name__ == "__main__":
    unittest.main()
