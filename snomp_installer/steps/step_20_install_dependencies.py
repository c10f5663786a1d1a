from __future__ import annotations

import logging

from .. import console
from ..context import InstallCtx
from ..lib.pkg import npm_install

logger = logging.getLogger(__name__)


class InstallDependenciesStep:
    step_id = "20_install_dependencies"

    def run(self, ctx: InstallCtx) -> None:
        console.section("Step 1: Installing npm dependencies...")
        # Install hooks stay off: native modules are built explicitly in the next step.
        print("Running npm install (skipping build scripts)...")
        npm_install(ctx.host, ctx.project_root, ctx.cfg.npm_install_args)
        logger.info("npm dependencies installed in %s", ctx.project_root)
        console.ok("npm dependencies installed")
        print()
