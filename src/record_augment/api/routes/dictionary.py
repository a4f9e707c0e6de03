"""GET /dictionary/status — report current dictionary store state."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from record_augment.api.dependencies import get_augmenter
from record_augment.augmenter import Augmenter

router = APIRouter()


class SourceInfo(BaseModel):
    path: str
    format: str | None
    mtime_ns: int | None
    key_count: int


class DictionaryStatus(BaseModel):
    key_count: int
    refresh_interval: float
    sources: list[SourceInfo]


@router.get("/dictionary/status", response_model=DictionaryStatus)
def dictionary_status(
    augmenter: Augmenter = Depends(get_augmenter),
) -> DictionaryStatus:
    """Return key counts and per-file state from the current table."""
    status = augmenter.store.status()
    return DictionaryStatus(
        key_count=status.key_count,
        refresh_interval=status.refresh_interval,
        sources=[
            SourceInfo(
                path=s.path,
                format=s.format,
                mtime_ns=s.mtime_ns,
                key_count=s.key_count,
            )
            for s in status.sources
        ],
    )
