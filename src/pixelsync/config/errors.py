"""Errors raised while reading pixelsync settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """A setting is present but unusable; ``names`` lists the offending variables."""

    def __init__(self, message: str, *, names: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.names = tuple(names)


class MissingConfigurationError(ConfigurationError):
    """Required settings are absent or blank."""
