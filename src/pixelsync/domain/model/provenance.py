"""Where a canonical territory record came from.

Territory data reaches the engine from three places. Every origin is folded
into the same ``Territory`` type; the provenance value only records the origin
for logging and for revision checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal


class ProvenanceKind(StrEnum):
    REMOTE_STORE = "remote_store"
    SURFACE_SCAN = "surface_scan"
    SYNTHESIZED = "synthesized"


@dataclass(slots=True, frozen=True, kw_only=True)
class FromRemoteStore:
    kind: Literal[ProvenanceKind.REMOTE_STORE] = ProvenanceKind.REMOTE_STORE
    revision: int | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class FromSurfaceScan:
    kind: Literal[ProvenanceKind.SURFACE_SCAN] = ProvenanceKind.SURFACE_SCAN
    surface_id: str
    feature_id: str


@dataclass(slots=True, frozen=True, kw_only=True)
class Synthesized:
    kind: Literal[ProvenanceKind.SYNTHESIZED] = ProvenanceKind.SYNTHESIZED
    reason: str | None = None


type Provenance = FromRemoteStore | FromSurfaceScan | Synthesized


def revision_of(provenance: Provenance) -> int | None:
    if isinstance(provenance, FromRemoteStore):
        return provenance.revision
    return None
