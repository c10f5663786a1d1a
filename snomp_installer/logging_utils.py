from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_active_log_path: Optional[str] = None


def _open_log_file(requested: str) -> logging.FileHandler:
    try:
        Path(requested).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(requested)
    except OSError:
        return logging.FileHandler(Path(tempfile.gettempdir()) / "snomp-install.log")


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = False,
) -> str:
    """Send installer records to a log file and return the file actually opened.

    An unwritable log_path falls back to the temp directory. Later calls are
    no-ops that return the first file.
    """

    global _active_log_path
    if _active_log_path is not None:
        return _active_log_path

    root = logging.getLogger()
    root.setLevel(level)
    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")

    file_handler = _open_log_file(os.path.expanduser(log_path))
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if also_console:
        stderr_handler = logging.StreamHandler()
        stderr_handler.setFormatter(fmt)
        root.addHandler(stderr_handler)

    _active_log_path = file_handler.baseFilename
    logging.getLogger(__name__).info("Log file: %s (requested %s)", _active_log_path, log_path)
    return _active_log_path
