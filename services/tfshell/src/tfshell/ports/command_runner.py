from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass
class CommandResult:
    exit_code: int
    output: bytes


class CommandRunnerPort(Protocol):
    def run(
        self, command: str, cwd: Path, timeout: float | None = None
    ) -> CommandResult: ...
