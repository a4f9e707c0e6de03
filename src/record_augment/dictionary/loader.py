"""Format loader — parse one dictionary file into a key → field-set table.

Every parser hands its tree to ``normalize``, which classifies the top-level
value (and each entry) as a field-set, a sequence or a scalar and handles each
shape in one place. Keys are always strings after loading.
"""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Mapping
from typing import Any, Literal

import yaml

from record_augment.errors import DictionaryLoadError
from record_augment.model.source import ArrayOptions, CsvOptions, SourceFile

logger = logging.getLogger(__name__)

FieldSet = dict[str, Any]
DictionaryTable = dict[str, FieldSet]
Shape = Literal["field_set", "sequence", "scalar"]


def key_str(value: Any) -> str:
    """Coerce a dictionary or lookup key to its string form."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def shape_of(value: Any) -> Shape:
    if isinstance(value, Mapping):
        return "field_set"
    if isinstance(value, (list, tuple)):
        return "sequence"
    return "scalar"


def _field_set(value: Mapping[Any, Any]) -> FieldSet:
    return {key_str(k): v for k, v in value.items()}


def normalize(tree: Any, options: ArrayOptions, path: str) -> DictionaryTable:
    """Turn a parsed JSON/YAML tree into a DictionaryTable."""
    if tree is None:
        return {}
    shape = shape_of(tree)

    table: DictionaryTable = {}
    if shape == "field_set":
        for key, value in tree.items():
            if shape_of(value) != "field_set":
                logger.warning(
                    "dropping dictionary entry that is not a mapping",
                    extra={"path": path, "key": key_str(key)},
                )
                continue
            table[key_str(key)] = _field_set(value)
        return table

    if shape == "sequence":
        if not options.key:
            raise DictionaryLoadError(
                path, "the dictionary is an array but no json_key is configured"
            )
        for index, element in enumerate(tree):
            if shape_of(element) != "field_set" or options.key not in element:
                logger.warning(
                    "dropping array element without key field %s",
                    options.key,
                    extra={"path": path, "index": index},
                )
                continue
            row = _field_set(element)
            key = key_str(row[options.key])
            if options.remove_key:
                del row[options.key]
            table[key] = row
        return table

    raise DictionaryLoadError(
        path, f"top-level value must be a mapping or an array, got {type(tree).__name__}"
    )


def load_csv(path: str, options: CsvOptions) -> DictionaryTable:
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f, delimiter=options.col_sep, quotechar=options.quote_char)
        lines = [line for line in reader if line]

    first_line = options.resolved_first_line
    header = options.header
    if first_line == "header":
        if not lines:
            return {}
        header = lines.pop(0)
    elif first_line == "ignore" and lines:
        lines.pop(0)
    if not header:
        raise DictionaryLoadError(path, "no CSV header is available")

    key_column = options.key or header[0]
    table: DictionaryTable = {}
    for line in lines:
        row = dict(zip(header, line))
        if key_column not in row:
            logger.warning(
                "dropping CSV row without key column %s",
                key_column,
                extra={"path": path},
            )
            continue
        key = key_str(row[key_column])
        if options.remove_key:
            del row[key_column]
        table[key] = row
    return table


def load_json(path: str, options: ArrayOptions) -> DictionaryTable:
    with open(path, encoding="utf-8-sig") as f:
        tree = json.load(f)
    return normalize(tree, options, path)


def load_yaml(path: str, options: ArrayOptions) -> DictionaryTable:
    with open(path, encoding="utf-8-sig") as f:
        tree = yaml.safe_load(f)
    return normalize(tree, options, path)


def load(source: SourceFile) -> DictionaryTable:
    """Load one dictionary file, raising DictionaryLoadError on any failure."""
    fmt = source.resolved_format
    try:
        if fmt == "csv":
            return load_csv(source.path, source.csv)
        if fmt == "json":
            return load_json(source.path, source.array)
        if fmt == "yaml":
            return load_yaml(source.path, source.array)
    except FileNotFoundError as exc:
        raise DictionaryLoadError(source.path, "file not found") from exc
    except (OSError, UnicodeDecodeError, csv.Error, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DictionaryLoadError(source.path, f"malformed content ({exc})") from exc
    raise DictionaryLoadError(source.path, "dictionary format is not recognized")
