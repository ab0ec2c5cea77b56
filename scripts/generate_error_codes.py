#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path
from typing import TypeGuard

import yaml


REPO_ROOT = Path(__file__).resolve().parents[1]
CATALOG = Path("services") / "tfshell" / "src" / "tfshell" / "signatures" / "signatures.yaml"
VERB_ORDER = ("init", "plan", "apply", "show")


def _is_dict(value: object) -> TypeGuard[dict[object, object]]:
    return isinstance(value, dict)


def _is_list(value: object) -> TypeGuard[list[object]]:
    return isinstance(value, list)


def _as_dict(value: object) -> dict[str, object]:
    if not _is_dict(value):
        return {}
    return {str(k): v for k, v in value.items()}


def _load_yaml(path: Path) -> dict[str, object]:
    raw: object = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return _as_dict(raw)


def _render_generated_notice(command: str) -> str:
    return "\n".join(
        [
            "> **Generated file. Do not edit directly.**",
            f"> Run: `{command}`",
        ]
    )


def _cell(value: object) -> str:
    return str(value or "").strip().replace("\n", "\\n").replace("|", "\\|")


def generate(repo_root: Path = REPO_ROOT) -> None:
    src = repo_root / CATALOG
    out = repo_root / "docs" / "reference" / "error-codes.md"

    if not src.exists():
        raise SystemExit(f"Signature catalog not found: {src}")

    data = _load_yaml(src)
    if data.get("version") != 1:
        raise SystemExit(f"Unsupported catalog version: {data.get('version')}")

    verbs = _as_dict(data.get("verbs"))
    lines: list[str] = []
    lines.append(_render_generated_notice("python scripts/generate_error_codes.py"))
    lines.append("")
    lines.append("# Terraform error codes")
    lines.append("")
    lines.append(f"This page is generated from `{CATALOG.as_posix()}`.")
    lines.append("Signatures are tried top to bottom; the first match wins.")

    for verb in VERB_ORDER:
        entries = verbs.get(verb)
        if not _is_list(entries):
            raise SystemExit(f"Invalid catalog: expected a list for verb {verb!r}")
        lines.append("")
        lines.append(f"## {verb}")
        lines.append("")
        lines.append("| Code | Pattern | Description |")
        lines.append("|---|---|---|")
        for entry in entries:
            if not _is_dict(entry):
                raise SystemExit("Invalid catalog: entries must be mappings")
            item = _as_dict(entry)
            code = _cell(item.get("code"))
            pattern = _cell(item.get("pattern"))
            if not code or not pattern:
                raise SystemExit(f"Invalid catalog entry (missing required fields): {item}")
            lines.append(f"| `{code}` | `{pattern}` | {_cell(item.get('description'))} |")
        lines.append(
            f"| `default` | `{_cell(data.get('fallback'))}` | Any other `Error:` line. |"
        )

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text("\n".join(lines) + "\n", encoding="utf-8")
    print(f"Generated {out}")


if __name__ == "__main__":
    generate()
