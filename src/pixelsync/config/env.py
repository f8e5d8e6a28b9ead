"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _read(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return every named variable, or report all missing/blank ones at once."""

    values = {name: value for name in names if (value := _read(name)) is not None}
    missing = sorted(set(names) - values.keys())
    if missing:
        raise MissingConfigurationError(
            f"Missing configuration for: {', '.join(missing)}", names=missing
        )
    return values


def _optional_number[TNumber: (int, float)](
    name: str, default: TNumber, parse: Callable[[str], TNumber], kind: str
) -> TNumber:
    raw = _read(name)
    if raw is None:
        return default
    try:
        return parse(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be {kind}, got {raw!r}", names=(name,)) from exc


def optional_float(name: str, default: float) -> float:
    """Non-negative float override (delays, TTLs); zero disables the delay."""

    value = _optional_number(name, default, float, "a number")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}", names=(name,))
    return value


def optional_int(name: str, default: int) -> int:
    """Positive integer override (sizes, counts)."""

    value = _optional_number(name, default, int, "an integer")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}", names=(name,))
    return value
