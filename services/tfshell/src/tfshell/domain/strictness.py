from __future__ import annotations

from dataclasses import replace

from tfshell.domain.diagnostics import Diagnostic, Severity


def apply_strictness(diagnostics: list[Diagnostic], strict: bool) -> list[Diagnostic]:
    """Promote upgradeable warnings to errors when running strict."""
    if not strict:
        return diagnostics
    return [
        replace(d, severity=Severity.ERROR)
        if d.severity == Severity.WARN and d.upgradeable
        else d
        for d in diagnostics
    ]
