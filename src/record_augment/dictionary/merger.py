"""Dictionary merger — combine the inline mapping and loaded files into one table."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from record_augment.dictionary.loader import DictionaryTable, key_str, shape_of
from record_augment.errors import ConfigurationError


def merge(existing: Mapping[str, Any], loaded: Mapping[str, Any]) -> DictionaryTable:
    """Return a new table where keys from ``loaded`` replace those in ``existing``.

    Overlapping keys take the loaded row whole; there is no field-level merge.
    """
    merged = dict(existing)
    merged.update(loaded)
    return merged


def merge_all(tables: Iterable[Mapping[str, Any]]) -> DictionaryTable:
    merged: DictionaryTable = {}
    for table in tables:
        merged = merge(merged, table)
    return merged


def validate_static_mapping(mapping: Mapping[Any, Any] | None) -> DictionaryTable:
    """Check that every inline dictionary value is a field-set.

    A value may also be an even-length list of alternating field names and
    values, e.g. ``["color", "green", "message", "OK"]``.
    """
    table: DictionaryTable = {}
    for key, value in (mapping or {}).items():
        shape = shape_of(value)
        if shape == "field_set":
            table[key_str(key)] = {key_str(k): v for k, v in value.items()}
        elif shape == "sequence" and len(value) % 2 == 0:
            pairs = zip(value[0::2], value[1::2])
            table[key_str(key)] = {key_str(k): v for k, v in pairs}
        else:
            raise ConfigurationError(
                f"The dictionary must be a mapping of string to field-set. "
                f"{key_str(key)!r} is a {type(value).__name__}"
            )
    return table
