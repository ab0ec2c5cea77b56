from __future__ import annotations

from dataclasses import dataclass, field

from tfshell.domain.json_types import JsonValue


@dataclass(frozen=True)
class Provider:
    name: str = ""
    path: str = ""
    version: str = ""


def _new_providers() -> list[Provider]:
    return []


@dataclass
class CommandOutput:
    raw: str
    command: str = ""
    exit_code: int | None = None


@dataclass
class InitOutput(CommandOutput):
    providers: list[Provider] = field(default_factory=_new_providers)


@dataclass
class PlanOutput(CommandOutput):
    pass


@dataclass
class ApplyOutput(CommandOutput):
    pass


@dataclass
class ShowOutput(CommandOutput):
    format_version: str | None = None
    terraform_version: str | None = None
    planned_values: JsonValue = None
    resource_changes: JsonValue = None
    configuration: JsonValue = None
