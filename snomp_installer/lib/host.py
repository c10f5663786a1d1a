from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from typing import Callable, Optional

from .command import CmdResult, run_cmd


@dataclass(frozen=True)
class Host:
    """Process-boundary seam: executable lookup and command execution.

    Every probe, install and build goes through one of these two callables.
    """

    which: Callable[[str], Optional[str]] = field(default=shutil.which)
    run: Callable[..., CmdResult] = field(default=run_cmd)

    def has(self, executable: str) -> bool:
        return self.which(executable) is not None
