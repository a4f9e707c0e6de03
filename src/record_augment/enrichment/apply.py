"""Lookup/apply — enrich one record from the dictionary table."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from record_augment.dictionary.loader import FieldSet, key_str
from record_augment.model.record import Record

logger = logging.getLogger(__name__)


class TableReader(Protocol):
    def get(self, key: str) -> FieldSet | None: ...


@dataclass
class LookupPolicy:
    source_field: str
    target: str = ""
    default: Mapping[str, Any] | None = None
    only_fields: list[str] | None = None    # allow-list
    ignore_fields: list[str] | None = None  # deny-list
    add_tag: list[str] = field(default_factory=list)

    def select(self, row: Mapping[str, Any]) -> dict[str, Any]:
        """Fields of ``row`` that should be written to the record."""
        if self.only_fields:
            return {name: row[name] for name in self.only_fields if name in row}
        ignored = set(self.ignore_fields or ())
        return {name: value for name, value in row.items() if name not in ignored}


def lookup_key(value: Any) -> str | None:
    """The dictionary key for a source field value; lists use their first item."""
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        value = value[0]
    return key_str(value)


def apply(record: Record, table: TableReader, policy: LookupPolicy) -> bool:
    """Write the matching row's fields into ``record``.

    Returns True when the record was enriched. Records without the source
    field, with no matching row and no default, or that fail mid-way are left
    as they are.
    """
    try:
        if not record.includes(policy.source_field):
            return False
        key = lookup_key(record.get(policy.source_field))
        if key is None:
            return False
        row = table.get(key)
        if row is None:
            row = policy.default
        if row is None:
            return False

        writes = [
            (f"{policy.target}[{key_str(name)}]", copy.deepcopy(value))
            for name, value in policy.select(row).items()
        ]
        for ref, value in writes:
            record.set(ref, value)
        record.mark_matched(policy.add_tag)
        return True
    except Exception:
        logger.exception(
            "Something went wrong when attempting to augment from dictionary",
            extra={"field": policy.source_field, "record": repr(record)},
        )
        return False
