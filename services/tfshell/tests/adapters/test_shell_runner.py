import shutil
import time

import pytest

from tfshell.adapters.errors import CommandFailed, CommandNotFound, CommandTimeout
from tfshell.adapters.runner.shell import ShellCommandRunner

pytestmark = pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")


def test_captures_stdout_and_stderr_together(tmp_path):
    result = ShellCommandRunner().run("echo out; echo err 1>&2; exit 3", tmp_path)
    assert result.exit_code == 3
    assert b"out\n" in result.output
    assert b"err\n" in result.output


def test_runs_in_working_directory(tmp_path):
    (tmp_path / "main.tf").write_text("", encoding="utf-8")
    result = ShellCommandRunner().run("ls", tmp_path)
    assert result.exit_code == 0
    assert b"main.tf" in result.output


def test_missing_working_directory(tmp_path):
    with pytest.raises(CommandFailed, match="Working directory not found"):
        ShellCommandRunner().run("true", tmp_path / "nope")


def test_missing_binary(tmp_path):
    with pytest.raises(CommandNotFound) as excinfo:
        ShellCommandRunner().run("tfshell-definitely-missing-binary init", tmp_path)
    assert "tfshell-definitely-missing-binary" in str(excinfo.value)


def test_timeout_kills_the_process(tmp_path):
    started = time.monotonic()
    with pytest.raises(CommandTimeout) as excinfo:
        ShellCommandRunner().run("echo started; sleep 30", tmp_path, timeout=0.5)
    assert time.monotonic() - started < 10
    assert excinfo.value.details is not None
    assert "started" in str(excinfo.value.details["output"])
