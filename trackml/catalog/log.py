"""Logging configuration using loguru.

loguru is the only sink.  Records emitted through stdlib ``logging`` (httpx,
httpcore, pydantic-settings) are forwarded to it, so command output and
library diagnostics share one format on stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from loguru import logger

_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"

_DEBUG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Libraries that log every request at INFO.
_CHATTY = ("httpx", "httpcore")

# stdlib level names that loguru also defines.
_SHARED_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _loguru_level(record: logging.LogRecord) -> str | int:
    """Map a stdlib record onto a loguru level name, or its number if unknown."""
    if record.levelname in _SHARED_LEVELS:
        return record.levelname
    return record.levelno


def _caller_depth() -> int:
    """Stack depth of the first frame outside ``logging`` and this module."""
    depth = 0
    frame = sys._getframe(1)
    while frame is not None and frame.f_code.co_filename in (logging.__file__, __file__):
        frame = frame.f_back
        depth += 1
    return depth


class _StdlibBridge(logging.Handler):
    """Re-emit stdlib records through loguru, attributed to their call site."""

    def emit(self, record: logging.LogRecord) -> None:
        logger.opt(depth=_caller_depth(), exception=record.exc_info).log(_loguru_level(record), record.getMessage())


def setup_logging(level: str = "WARNING", *, sink: TextIO | None = None) -> None:
    """Route all logging to *sink* (stderr by default) at *level*.

    At ``DEBUG`` and below the format gains the call site and httpx / httpcore
    request lines are let through; otherwise those libraries only report
    warnings.
    """
    level = level.upper()
    verbose = level in ("TRACE", "DEBUG")

    logger.remove()
    logger.add(
        sink or sys.stderr,
        level=level,
        format=_DEBUG_FORMAT if verbose else _FORMAT,
        backtrace=verbose,
        diagnose=False,
    )
    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)

    for name in _CHATTY:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    logger.debug("Logging initialised (level={})", level)
