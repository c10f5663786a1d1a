from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .context import InstallCtx
from .errors import InstallError

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single stage; raises InstallError to stop the run."""

    step_id: str

    def run(self, ctx: InstallCtx) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    failed_step: Optional[str] = None
    error: Optional[InstallError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_pipeline(*, ctx: InstallCtx, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order; the first failing step ends the run (fail closed)."""

    ran: List[str] = []

    for step in steps:
        ctx.current_step = step.step_id
        logger.info("Running step %s", step.step_id)
        try:
            step.run(ctx)
        except InstallError as e:
            logger.error("Step %s failed: %s", step.step_id, e)
            return PipelineResult(ran_steps=ran, failed_step=step.step_id, error=e)
        ran.append(step.step_id)

    ctx.current_step = None
    return PipelineResult(ran_steps=ran)
