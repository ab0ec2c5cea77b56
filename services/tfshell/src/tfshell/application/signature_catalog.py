from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import json
from pathlib import Path
import re

import jsonschema
import yaml

from tfshell.adapters.errors import CatalogError
from tfshell.domain.errors import ALLOWED_CODES, ErrorCode
from tfshell.domain.json_types import JsonDict, as_json_dict
from tfshell.domain.verb import Verb

SIGNATURES_DIR = Path(__file__).resolve().parents[1] / "signatures"
CATALOG_PATH = SIGNATURES_DIR / "signatures.yaml"
SCHEMA_PATH = SIGNATURES_DIR / "signatures.schema.json"


@dataclass(frozen=True)
class Signature:
    code: ErrorCode
    pattern: re.Pattern[str]
    description: str = ""


@dataclass(frozen=True)
class SignatureCatalog:
    tables: tuple[tuple[Verb, tuple[Signature, ...]], ...]
    fallback: re.Pattern[str]

    def table(self, verb: Verb) -> tuple[Signature, ...]:
        for table_verb, signatures in self.tables:
            if table_verb == verb:
                return signatures
        return ()


def _load_yaml(path: Path) -> JsonDict:
    try:
        raw: object = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise CatalogError(f"Could not read signature catalog {path}", cause=e)
    return as_json_dict(raw)


def _validate_schema(data: JsonDict, path: Path) -> None:
    schema = as_json_dict(json.loads(SCHEMA_PATH.read_text(encoding="utf-8")))
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise CatalogError(
            f"Invalid signature catalog {path}: {e.message}",
            details=as_json_dict({"path": list(e.path)}),
            cause=e,
        )


def _compile(pattern: str, where: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern, re.MULTILINE)
    except re.error as e:
        raise CatalogError(f"Invalid pattern for {where}: {e}", cause=e)


def _build_table(verb: Verb, entries: object) -> tuple[Signature, ...]:
    signatures: list[Signature] = []
    allowed = ALLOWED_CODES[verb]
    for entry in entries if isinstance(entries, list) else []:
        item = as_json_dict(entry)
        label = str(item.get("code"))
        try:
            code = ErrorCode(label)
        except ValueError:
            raise CatalogError(f"Unknown error code {label!r} for {verb.value}") from None
        if code not in allowed or code == ErrorCode.DEFAULT:
            raise CatalogError(f"Error code {label!r} is not valid for {verb.value}")
        signatures.append(
            Signature(
                code=code,
                pattern=_compile(str(item.get("pattern")), f"{verb.value}/{label}"),
                description=str(item.get("description") or ""),
            )
        )
    return tuple(signatures)


def load_catalog(path: Path = CATALOG_PATH) -> SignatureCatalog:
    data = _load_yaml(path)
    _validate_schema(data, path)
    verbs = as_json_dict(data.get("verbs"))
    fallback = _compile(str(data.get("fallback")), "fallback")
    if fallback.groups < 1:
        raise CatalogError("Fallback pattern must capture the error text in a group")
    return SignatureCatalog(
        tables=tuple((verb, _build_table(verb, verbs.get(verb.value))) for verb in Verb),
        fallback=fallback,
    )


@lru_cache(maxsize=1)
def default_catalog() -> SignatureCatalog:
    return load_catalog()
