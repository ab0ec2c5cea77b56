from __future__ import annotations

from pathlib import Path
import json as _json
import logging
from typing import TypeVar

import typer

from tfshell.adapters.errors import AdapterError, ConfigError
from tfshell.application.classifier import classify as classify_output
from tfshell.application.config import (
    CONFIG_FILENAME,
    TerraformSettings,
    load_settings,
    write_config,
)
from tfshell.application.result_serialization import serialize_error, serialize_result
from tfshell.application.terraform import Terraform
from tfshell.domain.diagnostics import Severity
from tfshell.domain.outputs import CommandOutput
from tfshell.domain.result import Result
from tfshell.domain.verb import Verb, parse_verb

app = typer.Typer(add_completion=False, help="Run terraform and classify its failures.")

T = TypeVar("T", bound=CommandOutput)

CHDIR = typer.Option(None, "--chdir", "-C", help="Terraform working directory.")
BINARY = typer.Option(None, "--binary", help="terraform executable to run.")
TIMEOUT = typer.Option(None, "--timeout", help="Kill terraform after this many seconds.")
STRICT = typer.Option(None, "--strict/--no-strict", help="Treat unclassified failures as errors.")
JSON = typer.Option(False, "--json", help="Print a JSON result instead of terraform output.")
FLAGS = typer.Argument(None, help="Flags passed to terraform (put them after --).")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _client(
    chdir: Path | None,
    binary: str | None,
    timeout: float | None,
    strict: bool | None,
) -> Terraform:
    try:
        settings = load_settings(chdir, binary=binary, timeout=timeout, strict=strict)
    except ConfigError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(2)
    return Terraform(settings)


def _report(result: Result[T], verb: Verb, args: list[str], as_json: bool) -> None:
    if as_json:
        typer.echo(_json.dumps(serialize_result(result, command=verb.value, args=args)))
        raise typer.Exit(result.exit_code)
    if result.value is not None and result.value.raw:
        typer.echo(result.value.raw, nl=not result.value.raw.endswith("\n"))
    for diag in result.diagnostics:
        if diag.severity == Severity.INFO:
            continue
        typer.echo(f"{diag.severity.value}: {diag.code}: {diag.message}", err=True)
    raise typer.Exit(result.exit_code)


@app.command()
def init(
    flags: list[str] = FLAGS,
    chdir: Path | None = CHDIR,
    binary: str | None = BINARY,
    timeout: float | None = TIMEOUT,
    strict: bool | None = STRICT,
    json: bool = JSON,
):
    args = flags or []
    result = _client(chdir, binary, timeout, strict).init(args)
    _report(result, Verb.INIT, args, json)


@app.command()
def plan(
    flags: list[str] = FLAGS,
    chdir: Path | None = CHDIR,
    binary: str | None = BINARY,
    timeout: float | None = TIMEOUT,
    strict: bool | None = STRICT,
    json: bool = JSON,
):
    args = flags or []
    result = _client(chdir, binary, timeout, strict).plan(args)
    _report(result, Verb.PLAN, args, json)


@app.command()
def apply(
    flags: list[str] = FLAGS,
    chdir: Path | None = CHDIR,
    binary: str | None = BINARY,
    timeout: float | None = TIMEOUT,
    strict: bool | None = STRICT,
    json: bool = JSON,
):
    args = flags or []
    result = _client(chdir, binary, timeout, strict).apply(args)
    _report(result, Verb.APPLY, args, json)


@app.command()
def show(
    plan_path: str = typer.Argument(..., help="Saved plan or state file."),
    chdir: Path | None = CHDIR,
    binary: str | None = BINARY,
    timeout: float | None = TIMEOUT,
    strict: bool | None = STRICT,
    json: bool = JSON,
):
    result = _client(chdir, binary, timeout, strict).show(plan_path)
    _report(result, Verb.SHOW, [plan_path], json)


@app.command()
def classify(
    verb: str = typer.Argument(..., help="init, plan, apply or show."),
    source: Path | None = typer.Argument(None, help="File with captured output; stdin if omitted."),
    json: bool = JSON,
):
    try:
        parsed = parse_verb(verb)
    except ValueError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(2)
    try:
        output = source.read_bytes() if source else typer.get_binary_stream("stdin").read()
    except OSError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(3)
    error = classify_output(output, parsed)
    if json:
        typer.echo(_json.dumps({"verb": parsed.value, "error": serialize_error(error)}))
    elif error is None:
        typer.echo("no error")
    else:
        typer.echo(f"{error.code.value}: {error.reason}")
    raise typer.Exit(0 if error is None else 2)


@app.command("config-init")
def config_init(
    path: Path = typer.Argument(Path(CONFIG_FILENAME)),
    binary: str = typer.Option("terraform", "--binary"),
    timeout: float | None = TIMEOUT,
    force: bool = typer.Option(False, "--force"),
):
    if path.exists() and not force:
        typer.echo(f"error: {path} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(2)
    try:
        write_config(path, TerraformSettings(binary=binary, timeout=timeout))
    except (OSError, AdapterError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(3)
    typer.echo(f"wrote {path}")
