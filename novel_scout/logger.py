"""Logging setup for **NovelScout**.

Modules log through one named logger::

    from novel_scout.logger import logger
    logger.info("Downloading %s", url)

Nothing is attached at import time. The CLI calls :func:`init_logging`;
library users either call :func:`configure` or let records propagate to
their own root handlers.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "NovelScout"

# A full download of a long novel logs one line per chapter.
LOG_FILE_MAX_BYTES: Final[int] = 2 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 5

# aiohttp and asyncio chatter drowns chapter progress at DEBUG.
NOISY_LOGGERS: Final[tuple[str, ...]] = ("aiohttp.client", "aiohttp.internal", "asyncio")

_Level = Union[int, str]


def _attach(lg: logging.Logger, handler: logging.Handler, fmt: str) -> None:
    handler.setFormatter(logging.Formatter(fmt))
    lg.addHandler(handler)


def _quiet(names: Iterable[str], level: int) -> None:
    for name in names:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def configure(
    *,
    level: _Level = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Attach a stdout handler (and a rotating file handler if *log_file*) to the project logger.

    With *replace_handlers* False the new handlers are added next to the
    existing ones.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()

    _attach(lg, logging.StreamHandler(sys.stdout), log_format)
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        _attach(lg, rotating, log_format)

    _quiet(NOISY_LOGGERS, lg.getEffectiveLevel())
    # pytest's caplog hooks the root logger
    lg.propagate = True
    return lg


def init_logging(
    level: _Level = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Entry point for the CLI group callback."""
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = logging.getLogger(LOGGER_NAME)

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
