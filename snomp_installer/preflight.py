"""Host preflight checks.

Each check yields exactly one DependencyCheckResult. The aggregate decides
whether the run may continue:

- Blocked: a Critical check failed; nothing else runs.
- Degraded: every Critical check passed but an Optional one failed; the
  operator must confirm before continuing.
- Ready: everything passed.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .config import InstallConfig
from .lib.host import Host
from .lib.pkg import dpkg_installed

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"\d+(?:\.\d+)*")

BUILD_ESSENTIAL = ("sudo apt-get install build-essential",)

QUICK_INSTALL = (
    "sudo apt-get update && sudo apt-get install -y build-essential libsodium-dev "
    "libboost-all-dev redis-server npm python3",
    "sudo npm install -g n pm2",
    "sudo n stable",
    "sudo systemctl enable redis-server",
    "sudo systemctl start redis-server",
)

RECOMMENDED_INSTALL = (
    "sudo apt-get install libsodium-dev libboost-all-dev",
    "sudo npm install -g pm2",
)


class Severity(enum.Enum):
    CRITICAL = "critical"
    OPTIONAL = "optional"


class HostReadiness(enum.Enum):
    READY = "ready"
    BLOCKED = "blocked"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class DependencyCheckResult:
    name: str
    present: bool
    severity: Severity
    version: Optional[str] = None
    detail: Optional[str] = None
    remediation: Tuple[str, ...] = ()

    @property
    def blocking(self) -> bool:
        return self.severity is Severity.CRITICAL and not self.present


def parse_version(output: str) -> Optional[str]:
    """Extract the first dotted number from the first line of a --version output."""

    first = output.strip().splitlines()[0] if output.strip() else ""
    m = _VERSION_RE.search(first)
    return m.group(0) if m else None


def parse_major(version: Optional[str]) -> Optional[int]:
    if not version:
        return None
    m = _VERSION_RE.search(version)
    if not m:
        return None
    return int(m.group(0).split(".")[0])


def query_version(host: Host, argv: Sequence[str]) -> Optional[str]:
    r = host.run(list(argv), check=False)
    if not r.ok:
        logger.warning("Version query failed: %s (rc=%s)", " ".join(argv), r.returncode)
        return None
    return parse_version(r.stdout or r.stderr)


def _tool(
    host: Host,
    *,
    name: str,
    executable: str,
    severity: Severity,
    remediation: Sequence[str],
    version_argv: Optional[Sequence[str]] = None,
    missing_detail: str = "not found",
) -> DependencyCheckResult:
    if not host.has(executable):
        return DependencyCheckResult(
            name=name,
            present=False,
            severity=severity,
            detail=missing_detail,
            remediation=tuple(remediation),
        )
    version = query_version(host, version_argv) if version_argv else None
    return DependencyCheckResult(name=name, present=True, severity=severity, version=version)


def check_node(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    result = _tool(
        host,
        name="Node.js",
        executable="node",
        severity=Severity.CRITICAL,
        version_argv=["node", "-v"],
        remediation=[
            "sudo apt-get update",
            "sudo apt-get install npm",
            "sudo npm install -g n",
            "sudo n stable",
        ],
    )
    if not result.present:
        return result

    major = parse_major(result.version)
    if major is None or major < cfg.min_node_major:
        # An unreadable version is treated as too old.
        return DependencyCheckResult(
            name=result.name,
            present=False,
            severity=Severity.CRITICAL,
            version=result.version,
            detail=f"too old (need {cfg.min_node_major}.x or higher)",
            remediation=("sudo npm install -g n", "sudo n stable"),
        )
    return result


def check_npm(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    return _tool(
        host,
        name="npm",
        executable="npm",
        severity=Severity.CRITICAL,
        version_argv=["npm", "-v"],
        remediation=["sudo apt-get install npm"],
    )


def check_redis(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    if not host.has("redis-cli"):
        return DependencyCheckResult(
            name="Redis",
            present=False,
            severity=Severity.CRITICAL,
            detail="not found",
            remediation=(
                "sudo apt-get install redis-server",
                "sudo systemctl enable redis-server",
                "sudo systemctl start redis-server",
            ),
        )

    probe = host.run(["redis-cli", "ping"], check=False, timeout=cfg.redis_ping_timeout)
    if not probe.ok:
        logger.warning("Redis liveness probe failed (rc=%s, timed_out=%s)", probe.returncode, probe.timed_out)
        return DependencyCheckResult(
            name="Redis",
            present=False,
            severity=Severity.CRITICAL,
            detail="installed but not running",
            remediation=("sudo systemctl start redis-server",),
        )
    return DependencyCheckResult(name="Redis", present=True, severity=Severity.CRITICAL, detail="running")


def check_gcc(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    return _tool(
        host,
        name="gcc",
        executable="gcc",
        severity=Severity.CRITICAL,
        version_argv=["gcc", "--version"],
        remediation=BUILD_ESSENTIAL,
    )


def check_make(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    return _tool(
        host,
        name="make",
        executable="make",
        severity=Severity.CRITICAL,
        version_argv=["make", "--version"],
        remediation=BUILD_ESSENTIAL,
    )


def check_gxx(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    return _tool(
        host,
        name="g++",
        executable="g++",
        severity=Severity.CRITICAL,
        version_argv=["g++", "--version"],
        remediation=BUILD_ESSENTIAL,
    )


def check_python(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    return _tool(
        host,
        name="Python 3",
        executable="python3",
        severity=Severity.CRITICAL,
        version_argv=["python3", "--version"],
        remediation=["sudo apt-get install python3"],
        missing_detail="not found (required by node-gyp)",
    )


def _system_library(host: Host, package: str) -> DependencyCheckResult:
    if dpkg_installed(host, package):
        return DependencyCheckResult(name=package, present=True, severity=Severity.OPTIONAL)
    return DependencyCheckResult(
        name=package,
        present=False,
        severity=Severity.OPTIONAL,
        detail="not found (optional but recommended)",
        remediation=(f"sudo apt-get install {package}",),
    )


def check_libsodium(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    return _system_library(host, "libsodium-dev")


def check_libboost(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    return _system_library(host, "libboost-all-dev")


def check_pm2(host: Host, cfg: InstallConfig) -> DependencyCheckResult:
    return _tool(
        host,
        name="PM2",
        executable="pm2",
        severity=Severity.OPTIONAL,
        version_argv=["pm2", "-v"],
        remediation=["sudo npm install -g pm2"],
        missing_detail="not found (optional but recommended for production)",
    )


Check = Callable[[Host, InstallConfig], DependencyCheckResult]

CHECKS: List[Check] = [
    check_node,
    check_npm,
    check_redis,
    check_gcc,
    check_make,
    check_gxx,
    check_python,
    check_libsodium,
    check_libboost,
    check_pm2,
]


def aggregate_readiness(results: Sequence[DependencyCheckResult]) -> HostReadiness:
    if any(r.blocking for r in results):
        return HostReadiness.BLOCKED
    if any(not r.present for r in results):
        return HostReadiness.DEGRADED
    return HostReadiness.READY


def check_host(
    host: Host,
    cfg: InstallConfig,
    checks: Sequence[Check] = CHECKS,
) -> Tuple[HostReadiness, List[DependencyCheckResult]]:
    """Run every check in order, then classify the host."""

    results = [check(host, cfg) for check in checks]
    for r in results:
        logger.info(
            "check %s: present=%s severity=%s version=%s detail=%s",
            r.name,
            r.present,
            r.severity.value,
            r.version,
            r.detail,
        )
    readiness = aggregate_readiness(results)
    logger.info("Host readiness: %s", readiness.value)
    return readiness, results
