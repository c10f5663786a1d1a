from __future__ import annotations

import logging

from .. import console
from ..context import InstallCtx
from ..errors import DependencyCheckFailed, OperatorDeclined
from ..preflight import (
    QUICK_INSTALL,
    RECOMMENDED_INSTALL,
    DependencyCheckResult,
    HostReadiness,
    Severity,
    check_host,
)

logger = logging.getLogger(__name__)


def _report(r: DependencyCheckResult) -> None:
    if r.present:
        label = f"{r.name} {r.version}" if r.version else r.name
        if r.detail:
            label = f"{label} is {r.detail}"
        console.ok(label)
        return

    label = f"{r.name} {r.version}" if r.version else r.name
    text = f"{label} {r.detail}" if r.detail else f"{label} not found"
    if r.severity is Severity.CRITICAL:
        console.fail(text)
    else:
        console.warn(text)
    console.commands(r.remediation)


class PreflightStep:
    step_id = "10_preflight"

    def run(self, ctx: InstallCtx) -> None:
        console.section("Checking system dependencies...")
        readiness, results = check_host(ctx.host, ctx.cfg)
        ctx.readiness = readiness
        ctx.checks = results
        for r in results:
            _report(r)
        print()

        if readiness is HostReadiness.BLOCKED:
            missing = [r.name for r in results if r.blocking]
            console.banner("❌ MISSING REQUIRED DEPENDENCIES")
            raise DependencyCheckFailed(
                f"Missing required dependencies: {', '.join(missing)}",
                remediation=[
                    "Please install the missing dependencies above and run this script again.",
                    "",
                    "Quick install command for all dependencies:",
                    "",
                    *QUICK_INSTALL,
                ],
            )

        if readiness is HostReadiness.DEGRADED:
            console.banner("⚠  OPTIONAL DEPENDENCIES MISSING")
            console.block(
                [
                    "Some optional dependencies are missing. The pool may work but could have issues.",
                    "It's recommended to install them with:",
                    "",
                    *RECOMMENDED_INSTALL,
                ]
            )
            if not ctx.confirm("Continue anyway?"):
                logger.info("Operator declined to continue with optional dependencies missing")
                raise OperatorDeclined("Installation cancelled.")
            logger.info("Operator accepted degraded host")

        console.ok("All required dependencies are installed")
        print()
