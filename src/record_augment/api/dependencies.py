"""FastAPI dependency providers.

The augmenter is attached to app.state at startup
and retrieved here via Request injection.
"""

from __future__ import annotations

from fastapi import Request

from record_augment.augmenter import Augmenter


def get_augmenter(request: Request) -> Augmenter:
    return request.app.state.augmenter  # type: ignore[no-any-return]
