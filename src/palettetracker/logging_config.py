"""
Logging Configuration
Sets up the package logger for the tracker application.
"""
import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: TextIO = sys.stdout
) -> logging.Logger:
    """
    Configures the logger of the 'palettetracker' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to also write the session log to.
        stream: Console stream, stdout by default.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("palettetracker")
    logger.setLevel(level)

    # Calling this twice (e.g. from tests) must not duplicate the output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at level {logging.getLevelName(level)}.")
    return logger
