from __future__ import annotations

from .. import console
from ..context import InstallCtx

NEXT_STEPS = [
    "Next steps:",
    "",
    "1. Configure the pool:",
    "   cp config_example.json config.json",
    "   # Edit config.json with your Redis settings",
    "",
    "2. Configure your coin:",
    "   # Create pool_configs/yourcoin.json",
    "   # See examples in pool_configs/ directory",
    "   # Configure: address, daemon settings, ports, etc.",
    "",
    "3. Start your coin daemon:",
    "   # Make sure your coin daemon is running and synced",
    "   # Example: zerod -daemon",
    "",
    "4. Start the pool:",
    "   pm2 start ecosystem.config.js",
    "   pm2 save",
    "   pm2 logs s-nomp",
    "",
    "   Or for development/testing:",
    "   npm start",
]


class ReportCompletionStep:
    step_id = "90_report_completion"

    def run(self, ctx: InstallCtx) -> None:
        console.banner("✓ Installation Complete!")
        console.block(NEXT_STEPS)
