"""GET /health — liveness check."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict:  # type: ignore[type-arg]
    augmenter = getattr(request.app.state, "augmenter", None)
    return {
        "status": "ok",
        "dictionary": "loaded" if augmenter is not None else "unavailable",
    }
