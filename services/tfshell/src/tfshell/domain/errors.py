from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tfshell.domain.verb import Verb


class ErrorCode(str, Enum):
    # init
    COPY_NOT_EMPTY = "copy-not-empty"
    PROVIDER_NOT_FOUND = "provider-not-found"
    DISCOVERY_UNREACHABLE = "discovery-unreachable"
    PROVIDER_VERSIONS_UNSUITABLE = "provider-versions-unsuitable"
    PROVIDER_INCOMPATIBLE = "provider-incompatible"
    PROVIDER_INSTALL_ERROR = "provider-install-error"
    MISSING_PROVIDERS_NO_INSTALL = "missing-providers-no-install"
    CHECKSUM_VERIFICATION = "checksum-verification"
    SIGNATURE_VERIFICATION = "signature-verification"
    # plan / apply
    INVALID_RESOURCE_TYPE = "invalid-resource-type"
    COULD_NOT_SATISFY_PLUGIN_REQUIREMENTS = "could-not-satisfy-plugin-requirements"
    # every verb
    DEFAULT = "default"

    @property
    def diagnostic_code(self) -> str:
        return "TF_" + self.value.upper().replace("-", "_")


_PLAN_CODES = frozenset(
    {
        ErrorCode.INVALID_RESOURCE_TYPE,
        ErrorCode.COULD_NOT_SATISFY_PLUGIN_REQUIREMENTS,
        ErrorCode.DEFAULT,
    }
)

ALLOWED_CODES: dict[Verb, frozenset[ErrorCode]] = {
    Verb.INIT: frozenset(ErrorCode) - (_PLAN_CODES - {ErrorCode.DEFAULT}),
    Verb.PLAN: _PLAN_CODES,
    Verb.APPLY: _PLAN_CODES,
    Verb.SHOW: frozenset({ErrorCode.DEFAULT}),
}


@dataclass(frozen=True)
class ToolError:
    """A terraform failure recognised in command output."""

    reason: str
    code: ErrorCode
    verb: Verb

    def __str__(self) -> str:
        return f"{self.verb.value}: {self.code.value}: {self.reason}"
