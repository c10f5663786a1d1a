from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence


class InstallError(RuntimeError):
    """Fatal installer failure.

    ``remediation`` holds the commands or hints shown to the operator before exit.
    """

    def __init__(self, message: str, *, remediation: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.remediation = tuple(remediation)


class NotProjectRootError(InstallError):
    pass


class DependencyCheckFailed(InstallError):
    pass


class OperatorDeclined(InstallError):
    pass


class CommandError(InstallError):
    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr


class PreconditionError(InstallError):
    def __init__(self, message: str, *, path: Path, remediation: Iterable[str] = ()) -> None:
        super().__init__(message, remediation=remediation)
        self.path = path


class PatchError(InstallError):
    pass


class PatchVerificationError(PatchError):
    """Raised after a failed patch has been rolled back from its backup."""
