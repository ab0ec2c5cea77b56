from tfshell.application.command_line import format_command


def test_format_command_joins_verb_and_flags():
    options = ["-verify-plugins=true", "-no-color"]
    assert format_command("init", options) == "terraform init -verify-plugins=true -no-color"


def test_format_command_without_flags():
    assert format_command("plan", []) == "terraform plan"


def test_format_command_uses_custom_binary():
    assert format_command("apply", ["-auto-approve"], binary="/opt/tf/terraform") == (
        "/opt/tf/terraform apply -auto-approve"
    )
