from __future__ import annotations

from .. import console
from ..context import InstallCtx


class CheckProcessManagerStep:
    step_id = "50_check_process_manager"

    def run(self, ctx: InstallCtx) -> None:
        console.section("Step 4: Checking PM2...")
        pm2 = ctx.check("PM2")
        if pm2 is not None and pm2.present:
            console.ok(f"PM2 is installed (version {pm2.version or 'unknown'})")
        else:
            console.warn("PM2 not found (recommended for production)")
            print("   Install with: sudo npm install pm2 -g")
        print()
