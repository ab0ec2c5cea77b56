from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path
import signal
import subprocess

from tfshell.adapters.errors import CommandFailed, CommandNotFound, CommandTimeout
from tfshell.domain.json_types import as_json_dict
from tfshell.ports.command_runner import CommandResult

logger = logging.getLogger(__name__)

# POSIX shells exit with 127 when the command word cannot be resolved.
SHELL_COMMAND_NOT_FOUND = 127


def _kill_group(proc: subprocess.Popen[bytes]) -> None:
    with contextlib.suppress(ProcessLookupError, PermissionError):
        os.killpg(proc.pid, signal.SIGKILL)


class ShellCommandRunner:
    """Runs a command line through ``sh -c`` and captures stdout and stderr together."""

    def __init__(self, shell: str = "sh") -> None:
        self.shell = shell

    def run(
        self, command: str, cwd: Path, timeout: float | None = None
    ) -> CommandResult:
        if not cwd.is_dir():
            raise CommandFailed(
                f"Working directory not found: {cwd}",
                details=as_json_dict({"command": command, "cwd": str(cwd)}),
            )
        logger.debug("running %r in %s", command, cwd)
        try:
            proc = subprocess.Popen(
                [self.shell, "-c", command],
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError as e:
            raise CommandFailed(
                f"Could not start {self.shell}: {e}",
                details=as_json_dict({"command": command, "cwd": str(cwd)}),
                cause=e,
            )
        try:
            output, _ = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            _kill_group(proc)
            output, _ = proc.communicate()
            raise CommandTimeout(
                f"Command timed out after {timeout}s: {command}",
                details=as_json_dict(
                    {
                        "command": command,
                        "timeout": timeout,
                        "output": output.decode("utf-8", errors="replace"),
                    }
                ),
                hint="Raise the timeout or check whether terraform is waiting for input.",
                cause=e,
            )
        logger.debug("%r exited with %s", command, proc.returncode)
        if proc.returncode == SHELL_COMMAND_NOT_FOUND:
            raise CommandNotFound(
                f"Command not found: {command.split(' ', 1)[0]}",
                details=as_json_dict(
                    {
                        "command": command,
                        "output": output.decode("utf-8", errors="replace"),
                    }
                ),
                hint="Install terraform or point --binary at it.",
            )
        return CommandResult(exit_code=proc.returncode, output=output)
