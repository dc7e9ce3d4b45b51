"""
ABACUS Emulator — Logging Setup

Console output goes through rich's RichHandler so it stays readable next
to the machine's own prompts; an optional plain file handler captures
everything at DEBUG for later inspection of traced runs.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console as RichConsole
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"


def setup_logging(
    name: str = "abacus_emulator",
    console_level: int = logging.WARNING,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return the package logger.

    Console handler writes to stderr at console_level. When log_file is
    given a file handler is added at DEBUG. Calling again for the same
    name replaces the handlers of the previous call, closing them.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(fh)

    ch = RichHandler(
        level=console_level,
        console=RichConsole(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    ch.setLevel(console_level)
    logger.addHandler(ch)

    logger.debug("Logger initialized: %s (console level %s)",
                 name, logging.getLevelName(console_level))
    if log_file is not None:
        logger.debug("Log file: %s", log_file)

    return logger
