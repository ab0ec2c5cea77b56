from __future__ import annotations

from collections.abc import Sequence

DEFAULT_BINARY = "terraform"


def format_command(
    verb: str, options: Sequence[str], binary: str = DEFAULT_BINARY
) -> str:
    """Join binary, verb and flags with single spaces.

    Flags are passed through verbatim and interpreted by the shell.
    """
    return " ".join([binary, verb, *options])
