"""Shared pytest fixtures for the record augment test suite."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable

import pytest

from record_augment.config import AugmentConfig
from record_augment.model.record import EventRecord

FIXTURES = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Dictionary fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def status_dictionary() -> dict[str, dict[str, str]]:
    return {
        "200": {"color": "green", "message": "OK"},
        "404": {"color": "red", "message": "Missing"},
    }


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory: write text to a file under tmp_path, bumping its mtime on rewrite."""

    def _factory(name: str, content: str) -> Path:
        path = tmp_path / name
        previous = path.stat().st_mtime_ns if path.exists() else None
        path.write_text(content, encoding="utf-8")
        if previous is not None:
            # coarse filesystem timestamps can hide a quick rewrite
            bumped = previous + 1_000_000_000
            os.utime(path, ns=(bumped, bumped))
        return path

    return _factory


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_config() -> Callable[..., AugmentConfig]:
    """Factory: AugmentConfig looking up "status", override via kwargs."""

    def _factory(**kwargs: Any) -> AugmentConfig:
        defaults: dict[str, Any] = {"source_field": "status"}
        defaults.update(kwargs)
        return AugmentConfig(**defaults)

    return _factory


@pytest.fixture
def make_record() -> Callable[..., EventRecord]:
    def _factory(**fields: Any) -> EventRecord:
        return EventRecord(dict(fields))

    return _factory
