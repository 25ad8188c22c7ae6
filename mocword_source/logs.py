"""Debug logging to a file, for use where stderr belongs to a UI."""

from __future__ import annotations

import logging
from pathlib import Path

PACKAGE_LOGGER = "mocword_source"


def enable_debug(log_dir: Path | None = None) -> logging.FileHandler:
    """Attach a FileHandler writing <log_dir>/debug.log (default ./.mocword)."""
    log_path = (log_dir or Path.cwd() / ".mocword") / "debug.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(log_path))
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    ))
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return handler


def disable_debug(handler: logging.FileHandler) -> None:
    """Close and remove a handler returned by enable_debug."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.removeHandler(handler)
    handler.close()
    logger.setLevel(logging.NOTSET)
