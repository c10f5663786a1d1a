from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional

from . import console
from .config import InstallConfig, load_install_config
from .context import InstallCtx
from .errors import InstallError, NotProjectRootError
from .lib.env import PATHS
from .lib.host import Host
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, Step, run_pipeline
from .steps import (
    BuildNativeModulesStep,
    CheckProcessManagerStep,
    InstallDependenciesStep,
    PatchJobManagerStep,
    PreflightStep,
    ReportCompletionStep,
)

logger = logging.getLogger(__name__)


def build_steps() -> List[Step]:
    return [
        PreflightStep(),
        InstallDependenciesStep(),
        BuildNativeModulesStep(),
        PatchJobManagerStep(),
        CheckProcessManagerStep(),
        ReportCompletionStep(),
    ]


def require_project_root(root: Path) -> None:
    if not (root / PATHS.manifest).is_file():
        raise NotProjectRootError(
            "Must be run from s-nomp root directory",
            remediation=[
                "Navigate to the s-nomp directory and run:",
                "cd s-nomp",
                "snomp-install",
            ],
        )


def run(
    *,
    project_root: Path,
    cfg: Optional[InstallConfig] = None,
    host: Optional[Host] = None,
    confirm: Callable[[str], bool] = console.confirm,
) -> PipelineResult:
    """Run the installer stages against project_root, stopping at the first failure."""

    require_project_root(project_root)

    ctx = InstallCtx(
        project_root=project_root,
        cfg=cfg or InstallConfig(),
        host=host or Host(),
        confirm=confirm,
    )
    logger.info("Installing into %s", project_root)
    return run_pipeline(ctx=ctx, steps=build_steps())


def _report_failure(e: InstallError) -> None:
    console.fail(str(e))
    if e.remediation:
        print()
        for line in e.remediation:
            print(f"   {line}" if line else "")
    print()


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="snomp-install")
    p.add_argument("--project-root", default=None, help="s-nomp checkout (default: current directory)")
    p.add_argument("--config", default=None, help="Path to installer config (yaml)")
    p.add_argument("--log", default=None, help="Path to installer log")
    p.add_argument("--verbose", action="store_true", help="Mirror log records to the terminal")

    args = p.parse_args(argv)

    try:
        cfg = load_install_config(args.config)
    except (OSError, ValueError) as e:
        console.fail(f"Could not load installer config {args.config}: {e}")
        print("   Fix or remove the --config file and run the installer again.")
        return 1

    log_path = args.log or cfg.log_path or DEFAULT_LOG_PATH
    actual_log_path = configure_logging(log_path=log_path, also_console=bool(args.verbose))

    console.banner("s-nomp Installation Script")

    root = Path(args.project_root or os.getcwd()).resolve()
    try:
        result = run(project_root=root, cfg=cfg)
    except InstallError as e:
        logger.error("Installer refused to start: %s", e)
        _report_failure(e)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    except Exception:
        logger.exception("Installer failed")
        raise

    if result.error is not None:
        _report_failure(result.error)
        print(f"See {actual_log_path} for details.")
        return 1

    logger.info("Installer finished: ran %s", ", ".join(result.ran_steps))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
