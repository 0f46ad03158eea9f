"""Logging configuration and the build-diagnostics sink.

Log records use the same layout everywhere:
    2026-01-01 12:00:00 [WARNING] cmdweave.core: duplicate_command_name: ...
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from cmdweave.core.datamodels import Diagnostic

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers installed by configure_logging, so a second call replaces them
_handlers: list[logging.Handler] = []


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Configure the ``cmdweave`` logger.

    Args:
        level: Log level (name or number)
        log_file: Optional path that also receives every record

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger("cmdweave")
    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    _handlers.append(stream)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        _handlers.append(file_handler)

    for handler in _handlers:
        root.addHandler(handler)
    root.setLevel(level)
    return root


def log_diagnostics(
    diagnostics: Iterable[Diagnostic],
    logger: Optional[logging.Logger] = None,
) -> int:
    """Emit each registry build diagnostic as a warning.

    Returns:
        Number of diagnostics logged
    """
    logger = logger or logging.getLogger("cmdweave.core")
    count = 0
    for diagnostic in diagnostics:
        logger.warning(str(diagnostic))
        count += 1
    return count
