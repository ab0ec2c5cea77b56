import json
import tomllib

from typer.testing import CliRunner

from tfshell.entrypoints.cli import app


def test_cli_classify_reads_stdin():
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["classify", "init"],
        input='Provider "azurm" not available for installation.\n',
    )
    assert result.exit_code == 2
    assert result.stdout.strip() == 'provider-not-found: Provider "azurm" not available for installation'


def test_cli_classify_reads_file_as_json(tmp_path):
    saved = tmp_path / "plan.log"
    saved.write_text("\nError: something wrong happened.\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(app, ["classify", "plan", str(saved), "--json"])
    assert result.exit_code == 2
    assert json.loads(result.stdout) == {
        "verb": "plan",
        "error": {"verb": "plan", "code": "default", "reason": "something wrong happened"},
    }


def test_cli_classify_clean_output():
    runner = CliRunner()
    result = runner.invoke(app, ["classify", "apply"], input="Apply complete!\n")
    assert result.exit_code == 0
    assert "no error" in result.stdout


def test_cli_classify_unknown_verb():
    runner = CliRunner()
    result = runner.invoke(app, ["classify", "destroy"], input="")
    assert result.exit_code == 2


def test_cli_config_init_writes_file(tmp_path):
    path = tmp_path / ".tfshell.toml"
    runner = CliRunner()
    result = runner.invoke(app, ["config-init", str(path), "--timeout", "60"])
    assert result.exit_code == 0
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    assert data["settings"]["binary"] == "terraform"
    assert data["settings"]["timeout"] == 60.0

    again = runner.invoke(app, ["config-init", str(path)])
    assert again.exit_code == 2
