from __future__ import annotations

from enum import Enum


class Verb(str, Enum):
    INIT = "init"
    PLAN = "plan"
    APPLY = "apply"
    SHOW = "show"


def parse_verb(value: str) -> Verb:
    try:
        return Verb(value.strip().lower())
    except ValueError:
        allowed = ", ".join(v.value for v in Verb)
        raise ValueError(f"Unknown verb: {value!r} (expected one of {allowed})") from None
