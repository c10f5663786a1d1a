from __future__ import annotations

import contextlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Paths:
    manifest: str = "package.json"
    node_modules: str = "node_modules"
    node_gyp: str = "node_modules/.bin/node-gyp"
    job_manager: str = "node_modules/stratum-pool/lib/jobManager.js"
    backup_suffix: str = ".backup"
    log_default: str = "~/.snomp-installer/install.log"


PATHS = Paths()


@contextlib.contextmanager
def working_directory(path: str | os.PathLike[str]) -> Iterator[Path]:
    """chdir into path for the duration of the block; the previous cwd is restored on every exit."""

    previous = os.getcwd()
    target = Path(path)
    os.chdir(target)
    logger.debug("cwd -> %s", target)
    try:
        yield target
    finally:
        os.chdir(previous)
        logger.debug("cwd <- %s", previous)
