from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
import tomllib
from typing import Any

import jsonschema
import tomli_w

from tfshell.adapters.errors import ConfigError
from tfshell.application.command_line import DEFAULT_BINARY
from tfshell.domain.json_types import JsonDict, as_json_dict
from tfshell.domain.verb import Verb

CONFIG_FILENAME = ".tfshell.toml"
ENV_BINARY = "TFSHELL_BINARY"
ENV_TIMEOUT = "TFSHELL_TIMEOUT"

_OPTION_LIST: dict[str, Any] = {"type": "array", "items": {"type": "string"}}

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "settings": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "binary": {"type": "string", "minLength": 1},
                "working_dir": {"type": "string"},
                "timeout": {"type": "number", "exclusiveMinimum": 0},
                "strict": {"type": "boolean"},
            },
        },
        "options": {
            "type": "object",
            "additionalProperties": False,
            "properties": {verb.value: _OPTION_LIST for verb in Verb},
        },
    },
}


def _new_default_options() -> dict[Verb, list[str]]:
    return {}


@dataclass
class TerraformSettings:
    binary: str = DEFAULT_BINARY
    working_dir: Path = field(default_factory=Path.cwd)
    timeout: float | None = None
    strict: bool = False
    default_options: dict[Verb, list[str]] = field(default_factory=_new_default_options)

    def options_for(self, verb: Verb, options: list[str]) -> list[str]:
        return [*self.default_options.get(verb, []), *options]


def read_config(path: Path) -> JsonDict:
    if not path.exists():
        return {}
    try:
        raw = as_json_dict(tomllib.loads(path.read_text(encoding="utf-8")))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}", cause=e)
    try:
        jsonschema.validate(raw, CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        location = ".".join(str(p) for p in e.path) or "<root>"
        raise ConfigError(
            f"Invalid {path.name}: {location}: {e.message}",
            details=as_json_dict({"path": str(path), "field": location}),
            cause=e,
        )
    return raw


def _env_timeout(env: Mapping[str, str]) -> float | None:
    raw = env.get(ENV_TIMEOUT)
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{ENV_TIMEOUT} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{ENV_TIMEOUT} must be positive, got {raw!r}")
    return value


def load_settings(
    working_dir: Path | None = None,
    *,
    config_path: Path | None = None,
    binary: str | None = None,
    timeout: float | None = None,
    strict: bool | None = None,
    env: Mapping[str, str] | None = None,
) -> TerraformSettings:
    """Resolve settings: arguments, then environment, then config file, then defaults."""
    environ = os.environ if env is None else env
    base = (working_dir or Path.cwd()).resolve()
    config_file = config_path or base / CONFIG_FILENAME
    data = read_config(config_file)
    file_settings = as_json_dict(data.get("settings"))
    file_options = as_json_dict(data.get("options"))

    resolved_dir = base
    if working_dir is None and file_settings.get("working_dir"):
        resolved_dir = (config_file.parent / str(file_settings["working_dir"])).resolve()

    file_timeout = file_settings.get("timeout")
    env_timeout = _env_timeout(environ)
    if timeout is not None:
        resolved_timeout: float | None = timeout
    elif env_timeout is not None:
        resolved_timeout = env_timeout
    elif isinstance(file_timeout, (int, float)):
        resolved_timeout = float(file_timeout)
    else:
        resolved_timeout = None

    default_options: dict[Verb, list[str]] = {}
    for verb in Verb:
        raw_options = file_options.get(verb.value)
        if isinstance(raw_options, list):
            default_options[verb] = [str(o) for o in raw_options]

    return TerraformSettings(
        binary=binary
        or environ.get(ENV_BINARY)
        or str(file_settings.get("binary") or DEFAULT_BINARY),
        working_dir=resolved_dir,
        timeout=resolved_timeout,
        strict=strict if strict is not None else bool(file_settings.get("strict", False)),
        default_options=default_options,
    )


def write_config(path: Path, settings: TerraformSettings) -> None:
    section: dict[str, Any] = {"binary": settings.binary, "strict": settings.strict}
    if settings.timeout is not None:
        section["timeout"] = settings.timeout
    payload: dict[str, Any] = {"settings": section}
    if settings.default_options:
        payload["options"] = {
            verb.value: list(options) for verb, options in settings.default_options.items()
        }
    path.write_text(tomli_w.dumps(payload), encoding="utf-8")
