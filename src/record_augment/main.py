"""FastAPI application factory with lifespan startup."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from record_augment.api.routes import augment, dictionary, health
from record_augment.augmenter import Augmenter
from record_augment.config import load_config


def configure_logging(level: str = "INFO") -> None:
    """Send package logs to stdout; safe to call more than once."""
    logger = logging.getLogger("record_augment")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load config and the dictionary on startup; a bad config aborts startup."""
    config = load_config()
    configure_logging(config.log_level)

    app.state.config = config
    app.state.augmenter = Augmenter(config.augment)

    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Record Augment",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(augment.router)
    app.include_router(dictionary.router)
    return app


app = create_app()
