from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import hashlib
from typing import Any

from tfshell.domain.errors import ToolError


class Severity(str, Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


@dataclass(frozen=True)
class Diagnostic:
    code: str
    rule: str
    severity: Severity
    message: str
    hint: str | None = None
    details: dict[str, Any] | None = None
    is_execution: bool = False
    upgradeable: bool = False
    id: str = field(init=False)

    def __post_init__(self) -> None:
        raw = f"{self.code}|{self.rule}|{self.severity}|{self.message}"
        object.__setattr__(self, "id", hashlib.sha256(raw.encode()).hexdigest()[:12])


def tool_error_diagnostic(error: ToolError) -> Diagnostic:
    return Diagnostic(
        code=error.code.diagnostic_code,
        rule=f"terraform.{error.verb.value}",
        severity=Severity.ERROR,
        message=error.reason,
        details={"verb": error.verb.value, "label": error.code.value},
    )
