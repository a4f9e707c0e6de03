"""Augmenter — the filter a host pipeline calls once per record.

Construction validates the configuration and performs the initial dictionary
load; any problem there raises and the host should not start. After that,
``filter`` never raises: refresh failures keep the previous dictionary and
per-record failures leave the record untouched.

``filter`` is safe to call from many worker threads at once. Whichever worker
first sees the refresh gate elapse performs the reload; the others keep
reading the current table until the swap.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from record_augment.config import AugmentConfig
from record_augment.dictionary import loader
from record_augment.dictionary.base import FileSource, StaticSource
from record_augment.dictionary.loader import DictionaryTable
from record_augment.dictionary.store import DictionaryStore, RefreshReport
from record_augment.enrichment.apply import LookupPolicy, apply
from record_augment.model.record import Record
from record_augment.model.source import SourceFile

logger = logging.getLogger(__name__)


class Augmenter:
    def __init__(
        self,
        config: AugmentConfig,
        clock: Callable[[], float] = time.monotonic,
        load_fn: Callable[[SourceFile], DictionaryTable] = loader.load,
    ) -> None:
        config.validate()
        self._config = config
        self.policy = LookupPolicy(
            source_field=config.source_field,
            target=config.augment_target,
            default=config.augment_default,
            only_fields=config.only_fields,
            ignore_fields=config.ignore_fields,
            add_tag=list(config.add_tag),
        )
        self.store = DictionaryStore(
            static=StaticSource(config.dictionary),
            files=[FileSource(source, load_fn) for source in config.source_files()],
            refresh_interval=config.refresh_interval,
            clock=clock,
        )
        self.store.load(strict=config.strict_initial_load)
        logger.debug("augment filter registered", extra={"field": config.source_field})

    def refresh(self) -> RefreshReport | None:
        report = self.store.maybe_refresh()
        if report is not None and report.failed:
            logger.warning(
                "some dictionary files could not be refreshed",
                extra={"failed": report.failed},
            )
        return report

    def filter(self, record: Record) -> bool:
        """Refresh if due, then enrich ``record`` in place. Returns True on a match."""
        self.refresh()
        return apply(record, self.store, self.policy)

    def filter_many(self, records: Iterable[Record]) -> int:
        return sum(1 for record in records if self.filter(record))
