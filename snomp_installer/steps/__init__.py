from .step_10_preflight import PreflightStep
from .step_20_install_dependencies import InstallDependenciesStep
from .step_30_build_native_modules import BuildNativeModulesStep, build_native_module
from .step_40_patch_job_manager import PatchJobManagerStep
from .step_50_check_process_manager import CheckProcessManagerStep
from .step_90_report_completion import ReportCompletionStep

__all__ = [
    "PreflightStep",
    "InstallDependenciesStep",
    "BuildNativeModulesStep",
    "build_native_module",
    "PatchJobManagerStep",
    "CheckProcessManagerStep",
    "ReportCompletionStep",
]
