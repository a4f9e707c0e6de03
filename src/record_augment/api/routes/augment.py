"""POST /augment — enrich a batch of records from the dictionary."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from record_augment.api.dependencies import get_augmenter
from record_augment.augmenter import Augmenter
from record_augment.model.record import EventRecord

router = APIRouter()


class AugmentRequest(BaseModel):
    records: list[dict[str, Any]] = Field(default_factory=list)


class AugmentResponse(BaseModel):
    records: list[dict[str, Any]]
    matched: int


# Plain def: served from the threadpool against the shared store.
@router.post("/augment", response_model=AugmentResponse)
def augment(
    body: AugmentRequest,
    augmenter: Augmenter = Depends(get_augmenter),
) -> AugmentResponse:
    """Enrich each record in order and return them with the match count."""
    records = [EventRecord(data) for data in body.records]
    matched = augmenter.filter_many(records)
    return AugmentResponse(records=[r.to_dict() for r in records], matched=matched)
