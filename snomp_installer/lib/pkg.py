from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .command import CmdResult
from .env import working_directory
from .host import Host

logger = logging.getLogger(__name__)


def dpkg_installed(host: Host, package: str) -> bool:
    """Return True if dpkg reports the package as installed.

    Hosts without dpkg report every package as missing.
    """
    if not host.has("dpkg-query"):
        return False
    r = host.run(["dpkg-query", "-W", "-f=${Status}", package], check=False)
    return r.ok and "install ok installed" in r.stdout


def npm_install(host: Host, project_root: Path, args: Sequence[str]) -> CmdResult:
    return host.run(["npm", "install", *args], cwd=str(project_root), capture=False)


def node_gyp_rebuild(host: Host, node_gyp: Path, package_dir: Path) -> CmdResult:
    """Rebuild the native add-on in package_dir using the project's node-gyp."""

    with working_directory(package_dir):
        logger.info("Rebuilding native module in %s", package_dir)
        return host.run([str(node_gyp), "rebuild"], cwd=str(package_dir), capture=False)
