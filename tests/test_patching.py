from pathlib import Path

import pytest

from conftest import JOB_MANAGER_JS
from snomp_installer.errors import PatchError, PatchVerificationError
from snomp_installer.patching import (
    VERUSHASH_LAZY_LOAD,
    PatchOutcome,
    PatchTarget,
    apply_patch,
    insert_lazy_load,
)

LAZY = "if (!vh) vh = require('verushash'); // lazy load only when needed"


def make_target(tmp_path: Path, content: str = JOB_MANAGER_JS) -> PatchTarget:
    p = tmp_path / "jobManager.js"
    p.write_text(content, encoding="utf-8")
    return PatchTarget.for_file(p, marker_text=VERUSHASH_LAZY_LOAD.marker)


def test_apply_defers_require_and_inserts_lazy_load(tmp_path):
    target = make_target(tmp_path)

    assert apply_patch(target) is PatchOutcome.APPLIED

    text = target.file_path.read_text(encoding="utf-8")
    assert "var vh = null; // lazy load verushash only when needed" in text
    assert "var vh = require('verushash');" not in text
    lines = text.splitlines()
    i = lines.index("                headerHash = vh.hash(headerSolnBuffer);")
    assert lines[i - 1] == "                " + LAZY


def test_lazy_load_only_inside_case_branch(tmp_path):
    target = make_target(tmp_path)
    apply_patch(target)

    lines = target.file_path.read_text(encoding="utf-8").splitlines()
    assert sum(1 for ln in lines if LAZY in ln) == 1
    outside = lines.index("        return vh.hash(headerSolnBuffer);")
    assert LAZY not in lines[outside - 1]


def test_backup_is_verbatim_copy(tmp_path):
    target = make_target(tmp_path)
    original = target.file_path.read_bytes()
    apply_patch(target)

    assert target.backup_path.name == "jobManager.js.backup"
    assert target.backup_path.read_bytes() == original


def test_second_apply_is_noop(tmp_path):
    target = make_target(tmp_path)
    apply_patch(target)
    once = target.file_path.read_bytes()

    assert apply_patch(target) is PatchOutcome.ALREADY_PATCHED
    assert target.file_path.read_bytes() == once


def test_rollback_when_marker_missing(tmp_path):
    # No eager require to rewrite, so the marker never appears.
    content = JOB_MANAGER_JS.replace("var vh = require('verushash');\n", "")
    target = make_target(tmp_path, content)
    before = target.file_path.read_bytes()

    with pytest.raises(PatchVerificationError):
        apply_patch(target)

    assert target.file_path.read_bytes() == before
    assert not target.backup_path.exists()


def test_missing_target(tmp_path):
    target = PatchTarget.for_file(tmp_path / "nope.js", marker_text="x")
    with pytest.raises(PatchError):
        apply_patch(target)


def test_backup_failure_leaves_file_untouched(tmp_path, monkeypatch):
    target = make_target(tmp_path)
    before = target.file_path.read_bytes()

    def boom(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("snomp_installer.patching.shutil.copy2", boom)
    with pytest.raises(PatchError, match="backup"):
        apply_patch(target)
    assert target.file_path.read_bytes() == before


def test_branch_without_break_ends_at_next_case():
    src = (
        "switch (algo) {\n"
        "    case 'verushash':\n"
        "        h = vh.hash(buf);\n"
        "    case 'other':\n"
        "        h = vh.hash(buf);\n"
        "        break;\n"
        "}\n"
    )
    out = insert_lazy_load(src, VERUSHASH_LAZY_LOAD).splitlines()
    assert out[2] == "        " + LAZY
    assert out[3] == "        h = vh.hash(buf);"
    assert out[5] == "        h = vh.hash(buf);"
    assert sum(1 for ln in out if LAZY in ln) == 1


def test_crlf_line_endings_preserved(tmp_path):
    target = make_target(tmp_path)
    target.file_path.write_bytes(JOB_MANAGER_JS.replace("\n", "\r\n").encode("utf-8"))

    apply_patch(target)

    data = target.file_path.read_bytes()
    assert b"\n" not in data.replace(b"\r\n", b"")
    assert (LAZY + "\r\n").encode("utf-8") in data


def test_single_insertion_with_two_calls_in_branch():
    src = (
        "switch (algo) {\n"
        "    case 'verushash':\n"
        "        a = vh.hash(x);\n"
        "        b = vh.hash(y);\n"
        "        break;\n"
        "}\n"
    )
    out = insert_lazy_load(src, VERUSHASH_LAZY_LOAD)
    assert out.count(LAZY) == 1
    lines = out.splitlines()
    assert lines[2] == "        " + LAZY
    assert lines[3] == "        a = vh.hash(x);"
    assert insert_lazy_load(out, VERUSHASH_LAZY_LOAD) == out


def test_non_utf8_target_is_patch_error(tmp_path):
    target = make_target(tmp_path)
    target.file_path.write_bytes(b"var vh = require('verushash');\n\xff\xfe\n")
    before = target.file_path.read_bytes()

    with pytest.raises(PatchError, match="UTF-8"):
        apply_patch(target)
    assert target.file_path.read_bytes() == before
    assert not target.backup_path.exists()
