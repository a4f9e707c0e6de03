"""PyYAML loader → typed config dataclasses."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from record_augment.errors import ConfigurationError
from record_augment.model.record import parse_field_ref
from record_augment.model.source import SourceFile

DICTIONARY_TYPES = ("auto", "csv", "json", "yaml", "yml")
FIRST_LINE_POLICIES = ("auto", "header", "ignore", "data")


@dataclass
class AugmentConfig:
    source_field: str = ""
    dictionary_path: list[Any] = field(default_factory=list)  # str or per-file mapping
    dictionary_type: str = "auto"
    dictionary: dict[Any, Any] | None = None
    csv_header: list[str] | None = None
    csv_first_line: str = "auto"
    csv_key: str | None = None
    csv_remove_key: bool = True
    csv_col_sep: str = ","
    csv_quote_char: str = '"'
    json_key: str | None = None
    json_remove_key: bool = True
    augment_target: str = ""
    augment_default: dict[str, Any] | None = None
    only_fields: list[str] | None = None
    ignore_fields: list[str] | None = None
    add_tag: list[str] = field(default_factory=list)
    refresh_interval: float = 300
    strict_initial_load: bool = True

    def source_files(self) -> list[SourceFile]:
        """Build one SourceFile per dictionary_path entry.

        Entries are either a path string or a mapping with a ``path`` key and
        any of the global csv_*/json_* options, which override the globals for
        that file only.
        """
        sources: list[SourceFile] = []
        for entry in self.dictionary_path:
            if isinstance(entry, str):
                entry = {"path": entry}
            if not isinstance(entry, dict) or not entry.get("path"):
                raise ConfigurationError(
                    f"dictionary_path entries must be a path or a mapping with 'path', got {entry!r}"
                )

            def opt(name: str, default: Any) -> Any:
                return entry.get(name, default)

            try:
                sources.append(
                    SourceFile(
                        path=str(entry["path"]),
                        format=opt("type", self.dictionary_type),
                        csv={
                            "first_line": opt("csv_first_line", self.csv_first_line),
                            "header": opt("csv_header", self.csv_header),
                            "key": opt("csv_key", self.csv_key),
                            "remove_key": opt("csv_remove_key", self.csv_remove_key),
                            "col_sep": opt("csv_col_sep", self.csv_col_sep),
                            "quote_char": opt("csv_quote_char", self.csv_quote_char),
                        },
                        array={
                            "key": opt("json_key", self.json_key),
                            "remove_key": opt("json_remove_key", self.json_remove_key),
                        },
                    )
                )
            except ValidationError as exc:
                raise ConfigurationError(
                    f"invalid options for dictionary {entry['path']}: {exc}"
                ) from exc
        return sources

    def validate(self) -> None:
        """Raise ConfigurationError for option combinations that cannot work."""
        if not self.source_field:
            raise ConfigurationError("The configuration option 'field' is required")
        try:
            parse_field_ref(self.source_field)
        except ValueError as exc:
            raise ConfigurationError(f"field is not a valid field reference: {exc}") from exc
        try:
            parse_field_ref(f"{self.augment_target}[x]")
        except ValueError as exc:
            raise ConfigurationError(
                f"augment_target is not a valid field reference: {exc}"
            ) from exc
        if self.only_fields and self.ignore_fields:
            raise ConfigurationError(
                "The configuration options 'only_fields' and 'ignore_fields' are mutually exclusive"
            )
        if self.dictionary_type not in DICTIONARY_TYPES:
            raise ConfigurationError(
                f"dictionary_type must be one of {', '.join(DICTIONARY_TYPES)}, "
                f"got {self.dictionary_type!r}"
            )
        if self.csv_first_line not in FIRST_LINE_POLICIES:
            raise ConfigurationError(
                f"csv_first_line must be one of {', '.join(FIRST_LINE_POLICIES)}, "
                f"got {self.csv_first_line!r}"
            )
        if isinstance(self.refresh_interval, bool) or not isinstance(
            self.refresh_interval, (int, float)
        ):
            raise ConfigurationError(
                f"refresh_interval must be a number of seconds, got {self.refresh_interval!r}"
            )
        if self.augment_default is not None and not isinstance(self.augment_default, dict):
            raise ConfigurationError("augment_default must be a mapping of field to value")

        for source in self.source_files():
            if source.resolved_format != "csv":
                continue
            first_line = source.csv.resolved_first_line
            if first_line == "header" and source.csv.header:
                raise ConfigurationError(
                    f"csv_first_line is set to 'header' but csv_header is set ({source.path})"
                )
            if first_line in ("ignore", "data") and not source.csv.header:
                raise ConfigurationError(
                    f"csv_first_line is set to '{first_line}' but csv_header is not set ({source.path})"
                )


@dataclass
class AppConfig:
    augment: AugmentConfig = field(default_factory=AugmentConfig)
    log_level: str = "INFO"


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load augment.yaml and return a typed AppConfig.

    Falls back to defaults if the file is absent or a key is missing.
    AUGMENT_CONFIG overrides the default path; LOG_LEVEL and
    AUGMENT_REFRESH_INTERVAL override the values read from the file.
    """
    raw: dict = {}
    if path is None:
        path = os.getenv(
            "AUGMENT_CONFIG",
            str(Path(__file__).parent.parent.parent / "config" / "augment.yaml"),
        )

    resolved = Path(path)
    if resolved.exists():
        with resolved.open() as f:
            raw = yaml.safe_load(f) or {}

    augment_raw = raw.get("augment", {}) or {}
    defaults = AugmentConfig()

    refresh_interval: Any = augment_raw.get("refresh_interval", defaults.refresh_interval)
    env_interval = os.getenv("AUGMENT_REFRESH_INTERVAL")
    if env_interval is not None:
        try:
            refresh_interval = float(env_interval)
        except ValueError as exc:
            raise ConfigurationError(
                f"AUGMENT_REFRESH_INTERVAL must be a number, got {env_interval!r}"
            ) from exc

    return AppConfig(
        augment=AugmentConfig(
            source_field=augment_raw.get("field", defaults.source_field),
            dictionary_path=_as_list(augment_raw.get("dictionary_path")),
            dictionary_type=augment_raw.get("dictionary_type", defaults.dictionary_type),
            dictionary=augment_raw.get("dictionary"),
            csv_header=augment_raw.get("csv_header"),
            csv_first_line=augment_raw.get("csv_first_line", defaults.csv_first_line),
            csv_key=augment_raw.get("csv_key"),
            csv_remove_key=augment_raw.get("csv_remove_key", defaults.csv_remove_key),
            csv_col_sep=augment_raw.get("csv_col_sep", defaults.csv_col_sep),
            csv_quote_char=augment_raw.get("csv_quote_char", defaults.csv_quote_char),
            json_key=augment_raw.get("json_key"),
            json_remove_key=augment_raw.get("json_remove_key", defaults.json_remove_key),
            augment_target=augment_raw.get("augment_target", defaults.augment_target),
            augment_default=augment_raw.get("augment_default"),
            # augment_fields is the older name of the allow-list
            only_fields=augment_raw.get("only_fields", augment_raw.get("augment_fields")),
            ignore_fields=augment_raw.get("ignore_fields"),
            add_tag=_as_list(augment_raw.get("add_tag")),
            refresh_interval=refresh_interval,
            strict_initial_load=augment_raw.get(
                "strict_initial_load", defaults.strict_initial_load
            ),
        ),
        log_level=os.getenv("LOG_LEVEL", raw.get("log_level", "INFO")),
    )
