from __future__ import annotations

import logging

from .. import console
from ..context import InstallCtx
from ..errors import PreconditionError
from ..patching import VERUSHASH_LAZY_LOAD, PatchOutcome, PatchTarget, apply_patch

logger = logging.getLogger(__name__)


class PatchJobManagerStep:
    step_id = "40_patch_job_manager"

    def run(self, ctx: InstallCtx) -> None:
        path = ctx.patch_file
        console.section(f"Step 3: Patching {path.name}...")

        if not path.is_file():
            raise PreconditionError(f"{ctx.cfg.patch_file} not found", path=path)

        target = PatchTarget.for_file(
            path,
            marker_text=VERUSHASH_LAZY_LOAD.marker,
            backup_suffix=ctx.cfg.backup_suffix,
        )
        print(f"Patching {path.name} to make {VERUSHASH_LAZY_LOAD.module} optional...")
        ctx.patch_outcome = apply_patch(target, VERUSHASH_LAZY_LOAD)

        if ctx.patch_outcome is PatchOutcome.ALREADY_PATCHED:
            console.ok(f"{path.name} already patched")
        else:
            console.ok(f"{path.name} patched successfully (backup saved as {target.backup_path})")
        print()
