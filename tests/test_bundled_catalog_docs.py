from pathlib import Path

import generate_error_codes


def test_bundled_catalog_renders(tmp_path: Path) -> None:
    catalog = generate_error_codes.REPO_ROOT / generate_error_codes.CATALOG
    target = tmp_path / generate_error_codes.CATALOG
    target.parent.mkdir(parents=True)
    target.write_text(catalog.read_text(encoding="utf-8"), encoding="utf-8")

    generate_error_codes.generate(tmp_path)

    out = (tmp_path / "docs" / "reference" / "error-codes.md").read_text(encoding="utf-8")
    for code in ("copy-not-empty", "missing-providers-no-install", "invalid-resource-type"):
        assert f"`{code}`" in out
