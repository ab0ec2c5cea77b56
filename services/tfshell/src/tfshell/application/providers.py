from __future__ import annotations

import re

from tfshell.application.classifier import decode_output
from tfshell.domain.outputs import Provider

DOWNLOAD_PREFIX = "- Downloading plugin for provider"

QUOTED_TOKEN = re.compile(r'"((?:[^"\\]|\\.)*)"')


def _unquote(token: str) -> str:
    return re.sub(r"\\(.)", r"\1", token)


def parse_provider_line(line: str) -> Provider:
    """Parse ``"<name>" (<path>) <version>...`` after the download prefix.

    Fields are read left to right; the first one that is missing or malformed
    leaves it and every later field empty.
    """
    rest = line[len(DOWNLOAD_PREFIX) :].lstrip()
    quoted = QUOTED_TOKEN.match(rest)
    if quoted is None:
        return Provider()
    name = _unquote(quoted.group(1))
    tokens = rest[quoted.end() :].split()
    if not tokens:
        return Provider(name=name)
    path = tokens[0].strip("()")
    if len(tokens) < 2:
        return Provider(name=name, path=path)
    version = tokens[1].removesuffix("...")
    return Provider(name=name, path=path, version=version)


def extract_providers(output: bytes | str) -> list[Provider]:
    return [
        parse_provider_line(line)
        for line in decode_output(output).splitlines()
        if line.startswith(DOWNLOAD_PREFIX)
    ]
