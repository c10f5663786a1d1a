from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .lib.env import PATHS

DEFAULT_NPM_INSTALL_ARGS = ["--legacy-peer-deps", "--ignore-scripts"]
DEFAULT_NATIVE_MODULES = ["equihashverify", "bignum"]


@dataclass(frozen=True)
class InstallConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def min_node_major(self) -> int:
        return int(((self.raw.get("node") or {}).get("min_major")) or 20)

    @property
    def redis_ping_timeout(self) -> float:
        return float(((self.raw.get("redis") or {}).get("ping_timeout")) or 0.5)

    @property
    def npm_install_args(self) -> List[str]:
        # Configured args are appended; the hook-suppressing defaults always stay.
        extra = [str(a) for a in ((self.raw.get("npm") or {}).get("install_args") or [])]
        return DEFAULT_NPM_INSTALL_ARGS + [a for a in extra if a not in DEFAULT_NPM_INSTALL_ARGS]

    @property
    def native_modules(self) -> List[str]:
        mods = self.raw.get("native_modules")
        return [str(m) for m in mods] if mods is not None else list(DEFAULT_NATIVE_MODULES)

    @property
    def patch_file(self) -> str:
        return str(((self.raw.get("patch") or {}).get("file")) or PATHS.job_manager)

    @property
    def backup_suffix(self) -> str:
        return str(((self.raw.get("patch") or {}).get("backup_suffix")) or PATHS.backup_suffix)

    @property
    def log_path(self) -> Optional[str]:
        value = (self.raw.get("logging") or {}).get("path")
        return str(value) if value else None


def load_install_config(path: Optional[str]) -> InstallConfig:
    if path is None:
        return InstallConfig()

    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the installer config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Installer config is not valid YAML: {p} ({e})") from e
    if not isinstance(raw, dict):
        raise ValueError(f"Installer config must contain a mapping/object: {p}")

    return InstallConfig(raw=raw)
