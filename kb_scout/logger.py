"""
Logging for KBScout.

Every module logs through the one named logger exported here::

    from kb_scout.logger import logger
    logger.info("Crawl done. Total: %d", total)

Output always goes to stdout. A rotating log file is added when the
configuration (``log_file``) or the CLI's ``--log-file`` names one; its size
limit and backup count come from ``log_max_bytes`` / ``log_backups``.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Final, Optional, Union

if TYPE_CHECKING:
    from kb_scout.config import KnowledgeConfig

LOGGER_NAME: Final[str] = "KBScout"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_MAX_BYTES: Final[int] = 5 * 1024 * 1024
DEFAULT_BACKUPS: Final[int] = 3
LEVELS: Final = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _with_format(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: Union[int, str] = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUPS,
) -> logging.Logger:
    """
    Reset the KBScout logger: stdout always, plus a rotating *log_file*.

    Previous handlers are closed, so reconfiguring never leaks file handles.
    The file rolls over at *max_bytes* and keeps *backup_count* old copies.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()

    lg.addHandler(_with_format(logging.StreamHandler(sys.stdout), log_format))
    if log_file is not None:
        rotating = RotatingFileHandler(
            str(log_file), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        lg.addHandler(_with_format(rotating, log_format))

    lg.propagate = False
    return lg


def configure_from(
    config: "KnowledgeConfig",
    *,
    level: Optional[str] = None,
    log_file: Union[str, Path, None] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """Apply the logging settings of *config*; explicit arguments (CLI flags) win."""
    return configure(
        level=level or config.log_level,
        log_file=log_file if log_file is not None else config.log_file,
        log_format=log_format or config.log_format,
        max_bytes=config.log_max_bytes,
        backup_count=config.log_backups,
    )


logger: logging.Logger = configure()

__all__ = [
    "logger",
    "configure",
    "configure_from",
    "DEFAULT_FORMAT",
    "DEFAULT_MAX_BYTES",
    "DEFAULT_BACKUPS",
    "LEVELS",
    "LOGGER_NAME",
]
