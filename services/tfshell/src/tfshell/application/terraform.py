from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TypeVar

from tfshell.adapters.errors import (
    AdapterError,
    CommandNotFound,
    CommandTimeout,
)
from tfshell.adapters.runner.shell import ShellCommandRunner
from tfshell.application.classifier import classify, decode_output
from tfshell.application.command_line import format_command
from tfshell.application.config import TerraformSettings
from tfshell.application.providers import extract_providers
from tfshell.application.signature_catalog import SignatureCatalog
from tfshell.domain.diagnostics import Diagnostic, Severity, tool_error_diagnostic
from tfshell.domain.json_types import as_json_dict, coerce_json_value, optional_str
from tfshell.domain.outputs import (
    ApplyOutput,
    CommandOutput,
    InitOutput,
    PlanOutput,
    ShowOutput,
)
from tfshell.domain.result import Result
from tfshell.domain.strictness import apply_strictness
from tfshell.domain.verb import Verb
from tfshell.ports.command_runner import CommandResult, CommandRunnerPort

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=CommandOutput)

SHOW_OPTIONS = ["-no-color", "-json"]


def _execution_diagnostic(verb: Verb, exc: AdapterError) -> Diagnostic:
    if isinstance(exc, CommandTimeout):
        code = "COMMAND_TIMEOUT"
    elif isinstance(exc, CommandNotFound):
        code = "COMMAND_NOT_FOUND"
    else:
        code = "COMMAND_FAILED"
    return Diagnostic(
        code=code,
        rule=f"terraform.{verb.value}",
        severity=Severity.ERROR,
        message=str(exc),
        hint=exc.hint,
        details=exc.details,
        is_execution=True,
    )


def _unclassified_exit(verb: Verb, exit_code: int) -> Diagnostic:
    return Diagnostic(
        code="TF_UNCLASSIFIED_EXIT",
        rule=f"terraform.{verb.value}",
        severity=Severity.WARN,
        message=f"terraform {verb.value} exited with status {exit_code} but no known error was found in its output",
        details={"exit_code": exit_code},
        upgradeable=True,
    )


def decode_show_payload(raw: str, output: ShowOutput) -> bool:
    """Fill ``output`` from ``terraform show -json`` text; False when it is not JSON."""
    try:
        payload: object = json.loads(raw)
    except json.JSONDecodeError:
        return False
    if not isinstance(payload, dict):
        return False
    data = as_json_dict(payload)
    output.format_version = optional_str(data.get("format_version"))
    output.terraform_version = optional_str(data.get("terraform_version"))
    output.planned_values = coerce_json_value(data.get("planned_values"))
    output.resource_changes = coerce_json_value(data.get("resource_changes"))
    output.configuration = coerce_json_value(data.get("configuration"))
    return True


class Terraform:
    """Runs terraform verbs in a working directory and classifies their output.

    Calls are independent: nothing is kept between them.
    """

    def __init__(
        self,
        settings: TerraformSettings | None = None,
        *,
        runner: CommandRunnerPort | None = None,
        catalog: SignatureCatalog | None = None,
    ) -> None:
        self.settings = settings or TerraformSettings()
        self.runner = runner or ShellCommandRunner()
        self.catalog = catalog

    @property
    def working_dir(self) -> Path:
        return self.settings.working_dir

    def command_for(self, verb: Verb, options: list[str]) -> str:
        return format_command(
            verb.value, self.settings.options_for(verb, options), self.settings.binary
        )

    def _execute(
        self, verb: Verb, options: list[str], output: OutputT
    ) -> tuple[Result[OutputT], CommandResult | None]:
        command = self.command_for(verb, options)
        output.command = command
        try:
            completed = self.runner.run(
                command, self.settings.working_dir, self.settings.timeout
            )
        except AdapterError as exc:
            logger.warning("terraform %s could not run: %s", verb.value, exc)
            return Result(value=output, diagnostics=[_execution_diagnostic(verb, exc)]), None

        output.raw = decode_output(completed.output)
        output.exit_code = completed.exit_code
        diagnostics: list[Diagnostic] = []
        error = classify(completed.output, verb, self.catalog)
        if error is not None:
            logger.info("terraform %s failed: %s (%s)", verb.value, error.code.value, error.reason)
            diagnostics.append(tool_error_diagnostic(error))
        elif completed.exit_code != 0:
            diagnostics.append(_unclassified_exit(verb, completed.exit_code))
        return (
            Result(
                value=output,
                error=error,
                diagnostics=apply_strictness(diagnostics, self.settings.strict),
            ),
            completed,
        )

    def init(self, options: list[str] | None = None) -> Result[InitOutput]:
        result, completed = self._execute(Verb.INIT, list(options or []), InitOutput(raw=""))
        if completed is not None and result.value is not None:
            result.value.providers = extract_providers(completed.output)
        return result

    def plan(self, options: list[str] | None = None) -> Result[PlanOutput]:
        result, _ = self._execute(Verb.PLAN, list(options or []), PlanOutput(raw=""))
        return result

    def apply(self, options: list[str] | None = None) -> Result[ApplyOutput]:
        result, _ = self._execute(Verb.APPLY, list(options or []), ApplyOutput(raw=""))
        return result

    def show(self, path: str | Path) -> Result[ShowOutput]:
        result, completed = self._execute(
            Verb.SHOW, [*SHOW_OPTIONS, str(path)], ShowOutput(raw="")
        )
        if completed is None or result.value is None:
            return result
        if not decode_show_payload(result.value.raw, result.value):
            # Not surfaced as a failure: terraform may print plain text here.
            logger.debug("terraform show output is not a JSON object")
            result.diagnostics.append(
                Diagnostic(
                    code="SHOW_DECODE_FAILED",
                    rule="terraform.show",
                    severity=Severity.INFO,
                    message="terraform show output could not be decoded as JSON",
                )
            )
        return result
