"""Public domain model surface."""

from __future__ import annotations

from pixelsync.domain.model.canvas import DEFAULT_GRID_SIZE, GeoBounds, Pixel, PixelCanvas
from pixelsync.domain.model.enums import OWNED_SOVEREIGNTIES, Sovereignty, parse_sovereignty
from pixelsync.domain.model.provenance import (
    FromRemoteStore,
    FromSurfaceScan,
    Provenance,
    ProvenanceKind,
    Synthesized,
    revision_of,
)
from pixelsync.domain.model.territory import (
    Geometry,
    SurfaceMapping,
    Territory,
    build_territory,
    normalize_owner_ref,
)

__all__ = [
    "DEFAULT_GRID_SIZE",
    "OWNED_SOVEREIGNTIES",
    "FromRemoteStore",
    "FromSurfaceScan",
    "GeoBounds",
    "Geometry",
    "Pixel",
    "PixelCanvas",
    "Provenance",
    "ProvenanceKind",
    "Sovereignty",
    "SurfaceMapping",
    "Synthesized",
    "Territory",
    "build_territory",
    "normalize_owner_ref",
    "parse_sovereignty",
    "revision_of",
]
