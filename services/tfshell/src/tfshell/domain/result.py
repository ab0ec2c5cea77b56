from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from tfshell.domain.diagnostics import Diagnostic, Severity
from tfshell.domain.errors import ToolError

T = TypeVar("T")


def _new_diagnostics() -> list[Diagnostic]:
    return []


@dataclass
class Result(Generic[T]):
    value: T | None = None
    error: ToolError | None = None
    diagnostics: list[Diagnostic] = field(default_factory=_new_diagnostics)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def exit_code(self) -> int:
        has_exec = any(
            d.is_execution and d.severity == Severity.ERROR for d in self.diagnostics
        )
        has_tool = self.error is not None or any(
            (not d.is_execution) and d.severity == Severity.ERROR
            for d in self.diagnostics
        )
        if has_exec:
            return 3
        if has_tool:
            return 2
        return 0
