from __future__ import annotations

import logging
from pathlib import Path

from .. import console
from ..context import InstallCtx
from ..errors import PreconditionError
from ..lib.pkg import node_gyp_rebuild

logger = logging.getLogger(__name__)


def build_native_module(ctx: InstallCtx, package: str) -> Path:
    package_dir = ctx.node_modules / package
    if not package_dir.is_dir():
        raise PreconditionError(
            f"{package} not found in {ctx.node_modules.name}",
            path=package_dir,
            remediation=["Check package.json and re-run the installer"],
        )

    print(f"Building {package}...")
    node_gyp_rebuild(ctx.host, ctx.node_gyp, package_dir)
    logger.info("Built native module %s", package)
    console.ok(f"{package} built successfully")
    return package_dir


class BuildNativeModulesStep:
    step_id = "30_build_native_modules"

    def run(self, ctx: InstallCtx) -> None:
        console.section("Step 2: Building native modules...")
        for package in ctx.cfg.native_modules:
            build_native_module(ctx, package)
            ctx.built_modules.append(package)
        print()
