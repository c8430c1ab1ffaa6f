"""
Logging configuration for termx.

Widgets own stdout while they run, so log records go to stderr or a file,
never to the stream being drawn on.
"""
from __future__ import annotations

import logging
import sys
from typing import TextIO

from .config import Settings

_root_logger = logging.getLogger("termx")

_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    level: str | int = "WARNING",
    stream: TextIO | None = None,
    file: str | None = None,
    format: str | None = None,
) -> None:
    """
    Configure the ``termx`` logger.

    Args:
        level: Log level name or number.
        stream: Stream handler target, stderr by default. Ignored when
            ``file`` is given.
        file: Write records to this file instead of a stream.
        format: Custom format string.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    _root_logger.setLevel(level)
    _root_logger.handlers.clear()

    formatter = logging.Formatter(format or _DEFAULT_FORMAT)
    handler: logging.Handler
    if file:
        handler = logging.FileHandler(file)
    else:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(level)
    _root_logger.addHandler(handler)


def setup_logging_from_settings(settings: Settings) -> None:
    setup_logging(settings.log_level, file=settings.log_file or None)
