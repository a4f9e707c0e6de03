"""Dictionary sources — the inline mapping and individual dictionary files."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from record_augment.dictionary import loader
from record_augment.dictionary.loader import DictionaryTable
from record_augment.dictionary.merger import validate_static_mapping
from record_augment.model.source import SourceFile


class DictionarySource(ABC):
    @abstractmethod
    def load(self) -> DictionaryTable:
        """Load and return this source's rows as a key → field-set table."""
        ...


class StaticSource(DictionarySource):
    """The inline ``dictionary`` mapping, validated once at construction."""

    def __init__(self, mapping: Mapping[Any, Any] | None) -> None:
        self._table = validate_static_mapping(mapping)

    def load(self) -> DictionaryTable:
        return self._table


class FileSource(DictionarySource):
    """One dictionary file; ``load_fn`` is swappable for tests."""

    def __init__(
        self,
        source: SourceFile,
        load_fn: Callable[[SourceFile], DictionaryTable] = loader.load,
    ) -> None:
        self.source = source
        self._load_fn = load_fn

    @property
    def path(self) -> str:
        return self.source.path

    def mtime(self) -> int | None:
        """Current modification time in ns, or None if the file is unreadable."""
        try:
            return os.stat(self.source.path).st_mtime_ns
        except OSError:
            return None

    def load(self) -> DictionaryTable:
        return self._load_fn(self.source)
