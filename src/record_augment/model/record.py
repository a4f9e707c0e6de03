"""Record access — the interface the augment filter needs from a host pipeline.

Field references follow the bracket convention used by log pipelines:
    "status"              top-level field
    "[status]"            same field
    "[http][status]"      nested field
    "http[status]"        same as [http][status]
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any, Protocol

_MISSING = object()
_BRACKETED = re.compile(r"\[([^\[\]]+)\]")


def parse_field_ref(ref: str) -> list[str]:
    """Split a field reference into its path segments."""
    head, bracket, rest = ref.partition("[")
    parts = [head] if head else []
    if bracket:
        tail = bracket + rest
        segments = _BRACKETED.findall(tail)
        if _BRACKETED.sub("", tail):
            raise ValueError(f"malformed field reference {ref!r}")
        parts.extend(segments)
    if not parts:
        raise ValueError(f"empty field reference {ref!r}")
    return parts


class Record(Protocol):
    def get(self, field: str) -> Any: ...

    def set(self, field: str, value: Any) -> None: ...

    def includes(self, field: str) -> bool: ...

    def mark_matched(self, tags: Sequence[str] = ()) -> None: ...


class EventRecord:
    """A Record backed by a plain dict."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = data if data is not None else {}
        self.matched = False

    def _lookup(self, field: str) -> Any:
        node: Any = self.data
        for part in parse_field_ref(field):
            if not isinstance(node, dict) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def get(self, field: str) -> Any:
        value = self._lookup(field)
        return None if value is _MISSING else value

    def includes(self, field: str) -> bool:
        return self._lookup(field) is not _MISSING

    def set(self, field: str, value: Any) -> None:
        *parents, leaf = parse_field_ref(field)
        node = self.data
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[leaf] = value

    def mark_matched(self, tags: Sequence[str] = ()) -> None:
        self.matched = True
        if not tags:
            return
        existing = self.data.get("tags")
        if not isinstance(existing, list):
            existing = [] if existing is None else [existing]
            self.data["tags"] = existing
        for tag in tags:
            if tag not in existing:
                existing.append(tag)

    def __repr__(self) -> str:
        return f"EventRecord({self.data!r})"

    def to_dict(self) -> dict[str, Any]:
        return self.data
