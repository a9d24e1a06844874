# This module contains a custom formatter for logging messages with different log levels.
import logging
from typing import Optional

from config import settings


class CustomFormatter(logging.Formatter):
    """
    A custom formatter for logging messages with different log levels.

    Attributes:
        grey (str): ANSI escape sequence for grey color.
        yellow (str): ANSI escape sequence for yellow color.
        red (str): ANSI escape sequence for red color.
        bold_red (str): ANSI escape sequence for bold red color.
        reset (str): ANSI escape sequence to reset color.
        format (str): The log message format.
        FORMATS (dict): A dictionary mapping log levels to their respective log message formats.

    Usage:
        logger = get_logger(__name__)
        logger.info("Loaded posts")
    """
    grey = "\x1b[37;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    dark_grey = "\x1b[30;1m"
    reset = "\x1b[0m"
    format = '[%(levelname)s] %(asctime)s - %(name)s - %(message)s'

    FORMATS = {
        logging.DEBUG: dark_grey + format + reset,
        logging.INFO: grey + format + reset,
        logging.WARNING: yellow + format + reset,
        logging.ERROR: red + format + reset,
        logging.CRITICAL: bold_red + format + reset
    }

    def format(self, record):
        """
        Formats the log record based on its log level.

        Args:
            record (logging.LogRecord): The log record to be formatted.

        Returns:
            str: The formatted log message.
        """
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


ROOT_LOGGER_NAME = "board"

_configured = False


def _configure_root() -> logging.Logger:
    """Attach the coloured console handler to the application root logger once."""
    global _configured
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not _configured:
        root.setLevel(getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))
        ch = logging.StreamHandler()
        ch.setLevel(logging.DEBUG)
        ch.setFormatter(CustomFormatter())
        root.addHandler(ch)
        _configured = True
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger that lives under the application root logger.

    Args:
        name: Usually the calling module's __name__.

    Returns:
        logging.Logger: A child of the "board" logger sharing its handlers.
    """
    root = _configure_root()
    if not name:
        return root
    return root.getChild(name)


def setup_file_logging(log_file: str, level: int = logging.DEBUG) -> logging.Handler:
    """
    Mirror application log output into a plain-text file.

    Args:
        log_file: Path of the log file to append to.
        level: Minimum level written to the file.

    Returns:
        logging.Handler: The handler that was attached.
    """
    root = _configure_root()
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(asctime)s - %(name)s - %(message)s'))
    root.addHandler(handler)
    return handler
