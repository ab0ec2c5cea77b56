from pathlib import Path

import pytest

from tfshell.adapters.errors import CatalogError
from tfshell.application.classifier import classify
from tfshell.application.signature_catalog import default_catalog, load_catalog
from tfshell.domain.errors import ErrorCode
from tfshell.domain.verb import Verb


def test_bundled_catalog_keeps_declaration_order():
    catalog = default_catalog()
    assert [s.code for s in catalog.table(Verb.INIT)] == [
        ErrorCode.COPY_NOT_EMPTY,
        ErrorCode.PROVIDER_NOT_FOUND,
        ErrorCode.DISCOVERY_UNREACHABLE,
        ErrorCode.PROVIDER_VERSIONS_UNSUITABLE,
        ErrorCode.PROVIDER_INCOMPATIBLE,
        ErrorCode.PROVIDER_INSTALL_ERROR,
        ErrorCode.MISSING_PROVIDERS_NO_INSTALL,
        ErrorCode.CHECKSUM_VERIFICATION,
        ErrorCode.SIGNATURE_VERIFICATION,
    ]
    assert [s.code for s in catalog.table(Verb.PLAN)] == [
        ErrorCode.INVALID_RESOURCE_TYPE,
        ErrorCode.COULD_NOT_SATISFY_PLUGIN_REQUIREMENTS,
    ]
    assert catalog.table(Verb.APPLY) == catalog.table(Verb.PLAN)
    assert catalog.table(Verb.SHOW) == ()


def test_default_catalog_is_built_once():
    assert default_catalog() is default_catalog()


def test_first_matching_signature_wins(tmp_path: Path):
    path = tmp_path / "signatures.yaml"
    path.write_text(
        """
version: 1
fallback: 'Error: (.*)'
verbs:
  init:
    - code: checksum-verification
      pattern: 'Error verifying'
    - code: signature-verification
      pattern: 'Error verifying GPG signature'
  plan: []
  apply: []
  show: []
""".lstrip(),
        encoding="utf-8",
    )
    catalog = load_catalog(path)
    error = classify(b'Error verifying GPG signature for provider "AWS"', Verb.INIT, catalog)
    assert error is not None
    assert error.code == ErrorCode.CHECKSUM_VERIFICATION
    assert error.reason == "Error verifying"


def test_rejects_code_from_another_verb(tmp_path: Path):
    path = tmp_path / "signatures.yaml"
    path.write_text(
        """
version: 1
fallback: 'Error: (.*)'
verbs:
  init: []
  plan:
    - code: copy-not-empty
      pattern: 'already contains files'
  apply: []
  show: []
""".lstrip(),
        encoding="utf-8",
    )
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_rejects_schema_violations(tmp_path: Path):
    path = tmp_path / "signatures.yaml"
    path.write_text("version: 1\nverbs: {}\n", encoding="utf-8")
    with pytest.raises(CatalogError, match="Invalid signature catalog"):
        load_catalog(path)


def test_rejects_bad_regex(tmp_path: Path):
    path = tmp_path / "signatures.yaml"
    path.write_text(
        """
version: 1
fallback: 'Error: (.*)'
verbs:
  init:
    - code: provider-not-found
      pattern: 'Provider "(.*" missing'
  plan: []
  apply: []
  show: []
""".lstrip(),
        encoding="utf-8",
    )
    with pytest.raises(CatalogError, match="provider-not-found"):
        load_catalog(path)
