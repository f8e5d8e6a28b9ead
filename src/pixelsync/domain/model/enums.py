"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Sovereignty(StrEnum):
    UNCONQUERED = "unconquered"
    PROTECTED = "protected"
    RULED = "ruled"


OWNED_SOVEREIGNTIES: frozenset[Sovereignty] = frozenset(
    {Sovereignty.PROTECTED, Sovereignty.RULED}
)


def parse_sovereignty(value: object) -> Sovereignty:
    """Map raw sovereignty values onto the enum; anything unknown is unconquered."""

    if isinstance(value, Sovereignty):
        return value
    if isinstance(value, str):
        try:
            return Sovereignty(value.strip().lower())
        except ValueError:
            return Sovereignty.UNCONQUERED
    return Sovereignty.UNCONQUERED
