"""Logging configuration and the shared error-reporting path."""

import logging
from typing import Optional

from errors import ErrorKind

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOGGER_NAME = "crt_sparkline"

logger = logging.getLogger(LOGGER_NAME)


def _level_from_value(value, fallback=logging.INFO):
    if value is None:
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        level = logging.getLevelName(value.upper())
        if isinstance(level, int):
            return level
    return fallback


def setup_logging(level="INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Attach handlers once; later calls only adjust the level."""
    resolved = _level_from_value(level)
    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        ch = logging.StreamHandler()
        ch.setFormatter(formatter)
        logger.addHandler(ch)

        if log_file:
            try:
                fh = logging.FileHandler(log_file)
            except OSError as e:
                logger.warning("Could not open log file %s: %s", log_file, e)
            else:
                fh.setFormatter(formatter)
                logger.addHandler(fh)

    logger.setLevel(resolved)
    for handler in logger.handlers:
        handler.setLevel(resolved)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logger.getChild(name)


def report_error(kind: ErrorKind, message: str, exc: Optional[BaseException] = None,
                 level: int = logging.WARNING) -> None:
    text = f"{kind.value}: {message}"
    if exc is not None:
        text = f"{text} ({type(exc).__name__}: {exc})"
    logger.log(level, text)
