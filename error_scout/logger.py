# === FILE: error_scout/logger.py ===
"""Logging setup for **ErrorScout**.

All crawler output goes through the ``ErrorScout`` logger and its children
(``ErrorScout.crawler``, ``ErrorScout.report`` ...), obtained with
:func:`get_logger`. Only the root project logger owns handlers: a stdout
handler and, when a log file is given, a rotating file handler.

The CLI calls :func:`init_logging` once per invocation; tests call
:func:`configure` to rebuild handlers on the current ``sys.stdout``.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "ErrorScout"

#: rotation of the --log-file output
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Return the project logger, or its child ``ErrorScout.<component>``."""
    if not component:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{component}")


def _handlers(log_file: Union[str, Path, None], fmt: str) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(path),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the ``ErrorScout`` logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Optional log file, rotated at 5 MiB. *None* means stdout only.
    log_format
        Format string shared by all handlers.
    replace_handlers
        Close and drop the current handlers first (default). *False* appends.
    """
    lg = get_logger()
    lg.setLevel(level)
    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()
    for handler in _handlers(log_file, log_format):
        lg.addHandler(handler)
    # keep crawl output out of the root logger (pytest, host applications)
    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Entry point for the CLI: replace handlers with the given settings."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "get_logger", "LOGGER_NAME", "DEFAULT_FORMAT"]
