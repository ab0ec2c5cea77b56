from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from typing import TypeVar

from tfshell.domain.diagnostics import Diagnostic
from tfshell.domain.errors import ToolError
from tfshell.domain.json_types import JsonDict, as_json_dict
from tfshell.domain.result import Result

T = TypeVar("T")


def serialize_error(error: ToolError | None) -> JsonDict | None:
    if error is None:
        return None
    return as_json_dict(
        {"verb": error.verb.value, "code": error.code.value, "reason": error.reason}
    )


def serialize_diagnostic(diag: Diagnostic) -> JsonDict:
    return as_json_dict(
        {
            "id": diag.id,
            "code": diag.code,
            "rule": diag.rule,
            "severity": diag.severity.value,
            "message": diag.message,
            "hint": diag.hint,
            "details": diag.details,
            "is_execution": diag.is_execution,
        }
    )


def _serialize_value(value: object) -> JsonDict | None:
    if value is None or not is_dataclass(value) or isinstance(value, type):
        return None
    return as_json_dict(asdict(value))


def serialize_result(
    result: Result[T],
    command: str,
    args: list[str],
) -> JsonDict:
    return as_json_dict(
        {
            "result_schema_version": 1,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "command": command,
            "args": args,
            "exit_code": result.exit_code,
            "error": serialize_error(result.error),
            "output": _serialize_value(result.value),
            "diagnostics": [serialize_diagnostic(d) for d in result.diagnostics],
        }
    )
