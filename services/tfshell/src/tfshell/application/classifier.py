"""Classify terraform output into a labelled error.

Each verb has an ordered table of signatures. The first signature that
matches wins; otherwise a generic ``Error: ...`` line is reported with the
``default`` label. Output without either yields ``None``, so a failing run
with unrecognised wording is indistinguishable from success at this level.
Callers that know the exit status should check it separately.
"""

from __future__ import annotations

from tfshell.application.signature_catalog import SignatureCatalog, default_catalog
from tfshell.domain.errors import ErrorCode, ToolError
from tfshell.domain.verb import Verb


def decode_output(output: bytes | str) -> str:
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def _strip_period(text: str) -> str:
    return text[:-1] if text.endswith(".") else text


def classify(
    output: bytes | str,
    verb: Verb,
    catalog: SignatureCatalog | None = None,
) -> ToolError | None:
    text = decode_output(output)
    signatures = catalog or default_catalog()
    for signature in signatures.table(verb):
        match = signature.pattern.search(text)
        if match is not None:
            return ToolError(
                reason=_strip_period(match.group(0)),
                code=signature.code,
                verb=verb,
            )
    # The fallback pattern consumes the terminating period itself.
    match = signatures.fallback.search(text)
    if match is not None:
        return ToolError(
            reason=match.group(1),
            code=ErrorCode.DEFAULT,
            verb=verb,
        )
    return None
