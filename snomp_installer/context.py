from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from . import console
from .config import InstallConfig
from .lib.env import PATHS
from .lib.host import Host
from .patching import PatchOutcome
from .preflight import DependencyCheckResult, HostReadiness


@dataclass
class InstallCtx:
    project_root: Path
    cfg: InstallConfig = field(default_factory=InstallConfig)
    host: Host = field(default_factory=Host)
    confirm: Callable[[str], bool] = console.confirm

    current_step: Optional[str] = None
    readiness: Optional[HostReadiness] = None
    checks: List[DependencyCheckResult] = field(default_factory=list)
    built_modules: List[str] = field(default_factory=list)
    patch_outcome: Optional[PatchOutcome] = None

    @property
    def node_modules(self) -> Path:
        return self.project_root / PATHS.node_modules

    @property
    def node_gyp(self) -> Path:
        return self.project_root / PATHS.node_gyp

    @property
    def patch_file(self) -> Path:
        return self.project_root / self.cfg.patch_file

    def check(self, name: str) -> Optional[DependencyCheckResult]:
        return next((r for r in self.checks if r.name == name), None)
