"""Unit tests for config loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from record_augment.config import AugmentConfig, load_config
from record_augment.errors import ConfigurationError


def test_defaults_when_file_absent(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("AUGMENT_REFRESH_INTERVAL", raising=False)
    config = load_config(tmp_path / "missing.yaml")
    assert config.augment.source_field == ""
    assert config.augment.refresh_interval == 300
    assert config.augment.csv_remove_key is True
    assert config.log_level == "INFO"


def test_load_from_yaml(
    write_file: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("AUGMENT_REFRESH_INTERVAL", raising=False)
    path = write_file(
        "augment.yaml",
        """
augment:
  field: status
  dictionary_path: codes.csv
  augment_fields: [color]
  add_tag: augmented
  refresh_interval: -1
  dictionary:
    200: {color: green}
""",
    )
    config = load_config(path).augment
    assert config.source_field == "status"
    assert config.dictionary_path == ["codes.csv"]
    assert config.only_fields == ["color"]
    assert config.add_tag == ["augmented"]
    assert config.refresh_interval == -1
    assert config.dictionary == {200: {"color": "green"}}


def test_env_overrides(write_file: Callable[..., Path], monkeypatch: pytest.MonkeyPatch) -> None:
    path = write_file("augment.yaml", "log_level: INFO\naugment: {field: status}\n")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("AUGMENT_REFRESH_INTERVAL", "5")
    config = load_config(path)
    assert config.log_level == "DEBUG"
    assert config.augment.refresh_interval == 5.0


def test_env_refresh_interval_must_be_numeric(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("AUGMENT_REFRESH_INTERVAL", "soon")
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.yaml")


def test_field_is_required() -> None:
    with pytest.raises(ConfigurationError, match="'field'"):
        AugmentConfig().validate()


def test_only_and_ignore_fields_are_exclusive(make_config: Callable[..., AugmentConfig]) -> None:
    with pytest.raises(ConfigurationError, match="mutually exclusive"):
        make_config(only_fields=["a"], ignore_fields=["b"]).validate()


def test_unknown_dictionary_type(make_config: Callable[..., AugmentConfig]) -> None:
    with pytest.raises(ConfigurationError):
        make_config(dictionary_type="xml").validate()


def test_header_policy_with_configured_header(make_config: Callable[..., AugmentConfig]) -> None:
    config = make_config(
        dictionary_path=["codes.csv"], csv_first_line="header", csv_header=["a", "b"]
    )
    with pytest.raises(ConfigurationError, match="'header'"):
        config.validate()


@pytest.mark.parametrize("first_line", ["ignore", "data"])
def test_header_required_for_ignore_and_data(
    make_config: Callable[..., AugmentConfig], first_line: str
) -> None:
    config = make_config(dictionary_path=["codes.csv"], csv_first_line=first_line)
    with pytest.raises(ConfigurationError, match="csv_header is not set"):
        config.validate()


def test_per_file_override_is_validated(make_config: Callable[..., AugmentConfig]) -> None:
    config = make_config(
        dictionary_path=[{"path": "codes.csv", "csv_first_line": "ignore"}],
    )
    with pytest.raises(ConfigurationError):
        config.validate()


def test_malformed_dictionary_path_entry(make_config: Callable[..., AugmentConfig]) -> None:
    with pytest.raises(ConfigurationError):
        make_config(dictionary_path=[{"type": "csv"}]).validate()


def test_invalid_col_sep(make_config: Callable[..., AugmentConfig]) -> None:
    with pytest.raises(ConfigurationError):
        make_config(dictionary_path=["codes.csv"], csv_col_sep=";;").validate()


def test_refresh_interval_must_be_numeric(make_config: Callable[..., AugmentConfig]) -> None:
    with pytest.raises(ConfigurationError):
        make_config(refresh_interval="often").validate()


def test_source_files_resolve_formats(make_config: Callable[..., AugmentConfig]) -> None:
    sources = make_config(
        dictionary_path=["a.csv", "b.yml", {"path": "c.txt", "type": "json"}]
    ).source_files()
    assert [s.resolved_format for s in sources] == ["csv", "yaml", "json"]


def test_repo_config_is_valid(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AUGMENT_CONFIG", raising=False)
    config = load_config()
    config.augment.validate()
    assert config.augment.source_field == "status"


@pytest.mark.parametrize("source_field", ["http[status", "[]", "[a]junk"])
def test_malformed_field_reference_is_fatal(
    make_config: Callable[..., AugmentConfig], source_field: str
) -> None:
    with pytest.raises(ConfigurationError, match="field"):
        make_config(source_field=source_field).validate()


@pytest.mark.parametrize("target", ["enrich[", "[a", "a]b["])
def test_malformed_augment_target_is_fatal(
    make_config: Callable[..., AugmentConfig], target: str
) -> None:
    with pytest.raises(ConfigurationError, match="augment_target"):
        make_config(augment_target=target).validate()


@pytest.mark.parametrize("target", ["", "augmented", "[meta]", "[meta][augment]"])
def test_valid_augment_targets(make_config: Callable[..., AugmentConfig], target: str) -> None:
    make_config(augment_target=target).validate()
