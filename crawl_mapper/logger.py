"""Logging setup for **CrawlMapper**.

Console records go to standard error, so commands that print reports on
standard output (``crawl-mapper search --format json``) stay machine-readable
at any log level::

    from crawl_mapper.logger import logger
    logger.warning("Could not fetch %s", url)

The CLI calls :func:`configure` once with the user's level, file and format.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "CrawlMapper"

_LevelT = Union[int, str]


class ConsoleHandler(logging.StreamHandler):
    """Writes to the ``sys.stderr`` current at emit time.

    Looking the stream up per record keeps output correct when stderr is
    swapped after configuration (click's test runner, pytest capture).
    """

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


def _rotating_file(file: Path | str) -> RotatingFileHandler:
    return RotatingFileHandler(
        filename=str(file),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Reset the project logger: console on stderr plus an optional rotating file.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Path to a logfile; *None* keeps console output only.
    log_format
        Format string for :class:`logging.Formatter`.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [ConsoleHandler()]
    if log_file is not None:
        handlers.append(_rotating_file(log_file))

    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)

    lg.propagate = False
    return lg


logger: logging.Logger = configure()

__all__ = ["logger", "configure", "ConsoleHandler", "DEFAULT_FORMAT", "LOGGER_NAME"]
