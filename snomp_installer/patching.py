"""Verified, reversible source patching of installed dependencies.

A patch moves a file through these states:

    Unpatched -> Backed-up -> Patched (verified)
                           -> rolled back from the backup (PatchVerificationError)

The marker text is both the "already patched" sentinel and the success check,
so applying a patch any number of times leaves the same content as applying
it once.
"""

from __future__ import annotations

import enum
import logging
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .errors import PatchError, PatchVerificationError
from .lib.env import PATHS

logger = logging.getLogger(__name__)


class PatchOutcome(enum.Enum):
    ALREADY_PATCHED = "already_patched"
    APPLIED = "applied"


@dataclass(frozen=True)
class PatchTarget:
    file_path: Path
    marker_text: str
    backup_path: Path

    @classmethod
    def for_file(cls, file_path: Path, *, marker_text: str, backup_suffix: str = PATHS.backup_suffix) -> "PatchTarget":
        return cls(
            file_path=file_path,
            marker_text=marker_text,
            backup_path=file_path.with_name(file_path.name + backup_suffix),
        )


@dataclass(frozen=True)
class LazyRequireRewrite:
    """Turn an eager ``require()`` of an optional module into a lazy one.

    Two edits:
    - ``var <binding> = require('<module>');`` becomes a null binding with the
      marker comment.
    - Inside the ``case '<case_value>':`` branch only, each line calling
      ``<binding>.<function>(`` gets a load-if-missing statement in front of it.
    """

    module: str
    binding: str
    case_value: str
    function: str = "hash"

    @property
    def marker(self) -> str:
        return f"lazy load {self.module}"

    @property
    def eager_statement(self) -> str:
        return f"var {self.binding} = require('{self.module}');"

    @property
    def deferred_statement(self) -> str:
        return f"var {self.binding} = null; // {self.marker} only when needed"

    @property
    def lazy_load_statement(self) -> str:
        return f"if (!{self.binding}) {self.binding} = require('{self.module}'); // lazy load only when needed"

    @property
    def case_label(self) -> str:
        return f"case '{self.case_value}':"

    @property
    def call_re(self) -> "re.Pattern[str]":
        return re.compile(rf"(?<![\w$.]){re.escape(self.binding)}\.{re.escape(self.function)}\(")


VERUSHASH_LAZY_LOAD = LazyRequireRewrite(module="verushash", binding="vh", case_value="verushash")


def defer_require(text: str, rw: LazyRequireRewrite) -> str:
    return text.replace(rw.eager_statement, rw.deferred_statement)


def _opens_other_branch(stripped: str) -> bool:
    return stripped.startswith("case ") or stripped.startswith("default:")


def insert_lazy_load(text: str, rw: LazyRequireRewrite) -> str:
    """Insert the lazy-load statement before the first call inside the matched case branch.

    The branch runs from the case label to the first line containing ``break;``
    (or up to the next case/default label). Later calls in the branch and calls
    outside it are untouched.
    """

    out: List[str] = []
    in_branch = False
    loaded = False
    for line in text.splitlines(keepends=True):
        stripped = line.strip()
        if in_branch and _opens_other_branch(stripped) and rw.case_label not in line:
            in_branch = False
        if not in_branch and rw.case_label in line:
            in_branch = True
            loaded = False

        if in_branch and not loaded and rw.call_re.search(line):
            loaded = True
            previous = out[-1].strip() if out else ""
            if previous != rw.lazy_load_statement:
                body = line.rstrip("\r\n")
                indent = body[: len(body) - len(body.lstrip())]
                ending = line[len(body):] or "\n"
                out.append(f"{indent}{rw.lazy_load_statement}{ending}")
        elif in_branch and stripped == rw.lazy_load_statement:
            loaded = True

        out.append(line)

        if in_branch and "break;" in line:
            in_branch = False
    return "".join(out)


def rewrite(text: str, rw: LazyRequireRewrite) -> str:
    return insert_lazy_load(defer_require(text, rw), rw)


def _read(path: Path) -> str:
    try:
        return path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise PatchError(f"{path} is not valid UTF-8 text: {e}") from e


def _restore(target: PatchTarget) -> None:
    os.replace(target.backup_path, target.file_path)
    logger.warning("Restored %s from %s", target.file_path, target.backup_path)


def apply_patch(target: PatchTarget, rw: LazyRequireRewrite = VERUSHASH_LAZY_LOAD) -> PatchOutcome:
    """Apply rw to target.file_path once.

    Returns ALREADY_PATCHED (no-op) when the marker is present, APPLIED when the
    rewritten file verifies. Raises PatchVerificationError after restoring the
    original if the marker is missing from the written file.
    """

    path = target.file_path
    if not path.is_file():
        raise PatchError(f"{path} not found", remediation=["Re-run the dependency install step"])

    original = _read(path)
    if target.marker_text in original:
        logger.info("%s already patched (marker %r present)", path, target.marker_text)
        return PatchOutcome.ALREADY_PATCHED

    try:
        shutil.copy2(path, target.backup_path)
    except OSError as e:
        raise PatchError(f"Could not write backup {target.backup_path}: {e}") from e
    logger.info("Backed up %s -> %s", path, target.backup_path)

    try:
        path.write_bytes(rewrite(original, rw).encode("utf-8"))
        verified = target.marker_text in _read(path)
    except OSError as e:
        _restore(target)
        raise PatchError(f"Failed to write patched {path}: {e}") from e

    if not verified:
        _restore(target)
        raise PatchVerificationError(
            f"Failed to patch {path.name}: marker {target.marker_text!r} not found after rewrite; original restored",
        )

    logger.info("Patched %s (backup kept at %s)", path, target.backup_path)
    return PatchOutcome.APPLIED
