from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import pytest

from snomp_installer.errors import CommandError
from snomp_installer.lib.command import CmdResult
from snomp_installer.lib.host import Host

ALL_TOOLS = ["node", "npm", "redis-cli", "gcc", "make", "g++", "python3", "pm2", "dpkg-query"]

Response = Union[CmdResult, Tuple[int, str]]


class FakeHost:
    """Records every process-boundary call; answers from a response table."""

    def __init__(self, tools: Iterable[str] = ALL_TOOLS, responses: Optional[Dict[Any, Response]] = None) -> None:
        self.tools = set(tools)
        self.responses: Dict[Any, Response] = {
            ("node", "-v"): (0, "v20.11.1\n"),
            ("redis-cli", "ping"): (0, "PONG\n"),
            "dpkg-query": (0, "install ok installed"),
        }
        self.responses.update(responses or {})
        self.calls: List[Tuple[List[str], Dict[str, Any]]] = []

    def which(self, name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if name in self.tools else None

    def run(self, argv, **kwargs) -> CmdResult:
        argv = [str(a) for a in argv]
        self.calls.append((argv, kwargs))
        resp = self.responses.get(tuple(argv), self.responses.get(Path(argv[0]).name, (0, "1.2.3\n")))
        if isinstance(resp, CmdResult):
            result = resp
        else:
            rc, out = resp
            result = CmdResult(argv=argv, returncode=rc, stdout=out, stderr="")
        if kwargs.get("check", True) and not result.ok:
            raise CommandError(f"Command failed ({result.returncode})", argv=argv, returncode=result.returncode)
        return result

    def as_host(self) -> Host:
        return Host(which=self.which, run=self.run)

    def argvs(self) -> List[List[str]]:
        return [argv for argv, _ in self.calls]


JOB_MANAGER_JS = """\
var events = require('events');
var crypto = require('crypto');
var bignum = require('bignum');
var vh = require('verushash');

var util = require('./util.js');

var JobManager = module.exports = function JobManager(options) {
    var processShare = function (jobId, nTime, nonce, soln) {
        var headerHash;
        switch (options.coin.algorithm) {
            case 'verushash':
                headerHash = vh.hash(headerSolnBuffer);
                break;
            case 'equihash':
            default:
                headerHash = util.sha256d(headerSolnBuffer);
                break;
        }
        return headerHash;
    };

    this.rehash = function (headerSolnBuffer) {
        return vh.hash(headerSolnBuffer);
    };
};
"""


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A minimal s-nomp checkout with installed dependencies."""

    root = tmp_path / "s-nomp"
    root.mkdir()
    (root / "package.json").write_text('{"name": "s-nomp"}\n', encoding="utf-8")
    for pkg in ("equihashverify", "bignum"):
        (root / "node_modules" / pkg).mkdir(parents=True)
    bin_dir = root / "node_modules" / ".bin"
    bin_dir.mkdir(parents=True)
    (bin_dir / "node-gyp").write_text("#!/bin/sh\n", encoding="utf-8")
    lib = root / "node_modules" / "stratum-pool" / "lib"
    lib.mkdir(parents=True)
    (lib / "jobManager.js").write_text(JOB_MANAGER_JS, encoding="utf-8")
    return root
