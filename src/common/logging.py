"""Logging configuration for the blog front end."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Names accepted in settings and on the command line (uvicorn takes the same set)
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO
    if level.upper() not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(LOG_LEVELS)}")
    return logging.getLevelName(level.upper())


def setup_logging(
    level: int | str = logging.INFO,
    module_name: str = "blog",
) -> logging.Logger:
    """Configure and return a logger with consistent formatting.

    Args:
        level: Logging level, as an int or a name such as "DEBUG".
        module_name: Name for the logger instance.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)

    if logger.handlers:
        return logger

    resolved = _coerce_level(level)
    logger.setLevel(resolved)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger


def set_level(level: int | str) -> None:
    """Change the level of every logger created through setup_logging."""
    resolved = _coerce_level(level)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and logger.handlers and (
            name == "blog" or name.startswith(("blog.", "content_api"))
        ):
            logger.setLevel(resolved)
            for handler in logger.handlers:
                handler.setLevel(resolved)
