"""DictionaryStore — owns the live table and refreshes it when files change.

The table is built from the inline mapping followed by every dictionary file
in configured order, so later files win per key. Each file's last good rows
are kept separately: a file that fails to reload keeps contributing what it
had, and the table is only rebuilt when at least one file reloaded.

Refresh protocol (``maybe_refresh``):
    1. skip when there are no files, refresh is disabled or the gate is closed
    2. take the write lock and re-check the gate
    3. stat every file, reload the ones whose mtime changed
    4. rebuild and swap the table if anything reloaded
    5. push the gate to now + refresh_interval
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from record_augment.dictionary.base import FileSource, StaticSource
from record_augment.dictionary.loader import DictionaryTable, FieldSet
from record_augment.dictionary.merger import merge_all
from record_augment.dictionary.rwlock import ReadWriteLock
from record_augment.errors import DictionaryLoadError

logger = logging.getLogger(__name__)


@dataclass
class RefreshReport:
    checked: list[str] = field(default_factory=list)
    reloaded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def swapped(self) -> bool:
        return bool(self.reloaded)


@dataclass
class SourceStatus:
    path: str
    format: str | None
    mtime_ns: int | None
    key_count: int


@dataclass
class StoreStatus:
    key_count: int
    refresh_interval: float
    sources: list[SourceStatus]


class DictionaryStore:
    def __init__(
        self,
        static: StaticSource,
        files: list[FileSource],
        refresh_interval: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._static = static
        self._files = files
        self._refresh_interval = refresh_interval
        self._clock = clock
        self._lock = ReadWriteLock()
        self._table: DictionaryTable = {}
        self._file_tables: list[DictionaryTable] = [{} for _ in files]
        self._mtimes: list[int | None] = [None for _ in files]
        self._next_refresh = clock()

    @property
    def refresh_enabled(self) -> bool:
        return bool(self._files) and self._refresh_interval >= 0

    def load(self, strict: bool = True) -> None:
        """Initial load of every source.

        With ``strict`` a DictionaryLoadError aborts start-up; otherwise the
        failing file starts empty and is retried at the next refresh.
        """
        with self._lock.write_locked():
            for i, source in enumerate(self._files):
                mtime = source.mtime()
                try:
                    self._file_tables[i] = source.load()
                except DictionaryLoadError as exc:
                    if strict:
                        raise
                    logger.warning(
                        "%s, starting with an empty dictionary for this file",
                        exc,
                        extra={"path": source.path},
                    )
                    continue
                self._mtimes[i] = mtime
            self._table = self._build()
            self._next_refresh = self._clock() + self._refresh_interval
        logger.info(
            "dictionary loaded",
            extra={"key_count": len(self._table), "file_count": len(self._files)},
        )

    def refresh_due(self) -> bool:
        return self.refresh_enabled and self._clock() >= self._next_refresh

    def maybe_refresh(self) -> RefreshReport | None:
        """Reload changed files if the refresh gate has elapsed.

        Returns None when no check pass ran, otherwise a RefreshReport.
        Reload failures are logged and reported, never raised.
        """
        if not self.refresh_due():
            return None

        with self._lock.write_locked():
            # another worker may have refreshed while we waited for the lock
            if not self.refresh_due():
                return None
            report = RefreshReport()
            try:
                for i, source in enumerate(self._files):
                    self._refresh_file(i, source, report)
                if report.swapped:
                    self._table = self._build()
                    logger.info(
                        "refreshed dictionary",
                        extra={"reloaded": report.reloaded, "key_count": len(self._table)},
                    )
            finally:
                self._next_refresh = self._clock() + self._refresh_interval
        return report

    def _refresh_file(self, i: int, source: FileSource, report: RefreshReport) -> None:
        report.checked.append(source.path)
        mtime = source.mtime()
        if mtime is None:
            logger.warning(
                "dictionary file read failure, continuing with old dictionary",
                extra={"path": source.path},
            )
            report.failed.append(source.path)
            return
        if mtime == self._mtimes[i]:
            return
        try:
            table = source.load()
        except Exception as exc:
            logger.warning(
                "%s, continuing with old dictionary",
                exc,
                extra={"path": source.path},
            )
            report.failed.append(source.path)
            return
        self._file_tables[i] = table
        self._mtimes[i] = mtime
        report.reloaded.append(source.path)

    def _build(self) -> DictionaryTable:
        table = merge_all([self._static.load(), *self._file_tables])
        logger.debug("built dictionary table", extra={"key_count": len(table)})
        return table

    def get(self, key: str) -> FieldSet | None:
        with self._lock.read_locked():
            return self._table.get(key)

    def snapshot(self) -> DictionaryTable:
        """The current table. Never mutated after the swap that installed it."""
        with self._lock.read_locked():
            return self._table

    def status(self) -> StoreStatus:
        with self._lock.read_locked():
            return StoreStatus(
                key_count=len(self._table),
                refresh_interval=self._refresh_interval,
                sources=[
                    SourceStatus(
                        path=source.path,
                        format=source.source.resolved_format,
                        mtime_ns=self._mtimes[i],
                        key_count=len(self._file_tables[i]),
                    )
                    for i, source in enumerate(self._files)
                ],
            )
