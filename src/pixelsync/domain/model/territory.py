"""Canonical territory record and its surface mapping."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Final

from .enums import Sovereignty, parse_sovereignty
from .provenance import Provenance, Synthesized

_BLANK_OWNER_VALUES: Final[frozenset[str]] = frozenset({"", "null", "undefined", "none"})

type Geometry = Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class SurfaceMapping:
    """Current position of a territory on the rendering surface."""

    surface_id: str
    feature_id: str


@dataclass(slots=True, kw_only=True)
class Territory:
    id: str
    owner_ref: str | None = None
    sovereignty: Sovereignty = Sovereignty.UNCONQUERED
    surface_mapping: SurfaceMapping | None = None
    geometry: Geometry | None = None
    name: str | None = None
    provenance: Provenance = field(default_factory=Synthesized)

    @property
    def has_owner(self) -> bool:
        return self.owner_ref is not None

    def ownership_differs(self, other: Territory) -> bool:
        return self.owner_ref != other.owner_ref or self.sovereignty != other.sovereignty

    def copy(self) -> Territory:
        return replace(self)


def normalize_owner_ref(value: object) -> str | None:
    """Collapse the many spellings of "nobody" into ``None``."""

    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _BLANK_OWNER_VALUES:
        return None
    return text


def build_territory(
    *,
    territory_id: str,
    owner_ref: object = None,
    sovereignty: object = None,
    surface_mapping: SurfaceMapping | None = None,
    geometry: Geometry | None = None,
    name: str | None = None,
    provenance: Provenance | None = None,
) -> Territory:
    """Normalize raw boundary values into a canonical ``Territory``."""

    return Territory(
        id=territory_id,
        owner_ref=normalize_owner_ref(owner_ref),
        sovereignty=parse_sovereignty(sovereignty),
        surface_mapping=surface_mapping,
        geometry=geometry,
        name=name or None,
        provenance=provenance or Synthesized(),
    )
