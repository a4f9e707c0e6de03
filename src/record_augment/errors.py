"""Exception types shared across the augment filter."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised at start-up when the filter configuration is unusable."""


class DictionaryLoadError(Exception):
    """Raised when a dictionary source file cannot be loaded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{reason} when loading dictionary file at {path}")
        self.path = path
        self.reason = reason
