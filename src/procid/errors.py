"""Exceptions raised by procid."""

from __future__ import annotations


class ProcidError(Exception):
    """Base class for procid errors."""


class ConfigError(ProcidError, ValueError):
    """Raised when an identity configuration value is invalid."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
