import sys

import pytest

from snomp_installer.errors import CommandError
from snomp_installer.lib.command import fmt_argv, run_cmd


def test_captures_output():
    r = run_cmd([sys.executable, "-c", "print('hello')"])
    assert r.ok
    assert r.stdout.strip() == "hello"
    assert r.first_line() == "hello"


def test_nonzero_exit_raises():
    with pytest.raises(CommandError) as ei:
        run_cmd([sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"])
    assert ei.value.returncode == 3
    assert ei.value.stderr == "bad"


def test_nonzero_exit_unchecked():
    r = run_cmd([sys.executable, "-c", "import sys; sys.exit(2)"], check=False)
    assert r.returncode == 2
    assert not r.ok


def test_timeout_is_a_failed_result():
    r = run_cmd([sys.executable, "-c", "import time; time.sleep(5)"], check=False, timeout=0.2)
    assert r.timed_out
    assert not r.ok


def test_missing_executable():
    with pytest.raises(CommandError):
        run_cmd(["definitely-not-a-real-binary-snomp"])
    r = run_cmd(["definitely-not-a-real-binary-snomp"], check=False)
    assert r.returncode == 127


def test_fmt_argv_quotes():
    assert fmt_argv(["echo", "a b"]) == "echo 'a b'"
