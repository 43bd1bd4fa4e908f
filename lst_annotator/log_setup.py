"""
Logging setup shared by the CLI and anything embedding the converter.

Console output goes through rich's RichHandler; an optional log file
captures everything at DEBUG with call-site details.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

__all__ = ['setup_logging', 'level_from_verbosity']

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"


def level_from_verbosity(verbose: int = 0, quiet: bool = False) -> int:
    """Map -v/-q style flags to a logging level."""
    if quiet:
        return logging.ERROR
    if verbose >= 1:
        return logging.DEBUG
    return logging.INFO


def setup_logging(
    name: str = "lst_annotator",
    console_level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure and return the package logger.

    Calling again replaces the handlers, so the CLI can be invoked
    repeatedly in one process (tests do).
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # stderr keeps --print tables on stdout clean
    ch = RichHandler(
        console=Console(stderr=True),
        level=console_level,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    ch.setLevel(console_level)
    logger.addHandler(ch)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(fh)
        logger.debug("Log file: %s", log_path)

    return logger
