"""Pixel canvas value objects."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

    from .territory import Geometry

DEFAULT_GRID_SIZE: Final[int] = 64


@dataclass(slots=True, frozen=True, kw_only=True)
class Pixel:
    x: int
    y: int
    color: str
    last_editor: str | None = None
    last_edited_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class GeoBounds:
    west: float
    south: float
    east: float
    north: float

    def corners(self) -> list[list[float]]:
        """Image source corners: top-left, top-right, bottom-right, bottom-left."""

        return [
            [self.west, self.north],
            [self.east, self.north],
            [self.east, self.south],
            [self.west, self.south],
        ]

    def intersects(self, other: GeoBounds) -> bool:
        return not (
            self.east < other.west
            or other.east < self.west
            or self.north < other.south
            or other.north < self.south
        )

    @classmethod
    def from_geometry(cls, geometry: Geometry | None) -> GeoBounds | None:
        """Bounding box over every ring of a Polygon or MultiPolygon."""

        if not geometry:
            return None
        geometry_type = geometry.get("type")
        coordinates = geometry.get("coordinates") or []
        if geometry_type == "Polygon":
            rings = list(coordinates)
        elif geometry_type == "MultiPolygon":
            rings = [ring for polygon in coordinates for ring in polygon]
        else:
            return None

        lngs: list[float] = []
        lats: list[float] = []
        for ring in rings:
            for point in ring:
                lngs.append(float(point[0]))
                lats.append(float(point[1]))
        if not lngs:
            return None
        return cls(west=min(lngs), south=min(lats), east=max(lngs), north=max(lats))


@dataclass(slots=True, frozen=True, kw_only=True)
class PixelCanvas:
    """Owner-authored raster content of one territory.

    An empty canvas is a normal value meaning "no art yet". ``filled_pixels``
    carries a trusted count from the store when it differs from the number of
    pixels actually transferred.
    """

    territory_id: str
    pixels: tuple[Pixel, ...] = field(default_factory=tuple)
    filled_pixels: int | None = None
    bounds: GeoBounds | None = None
    width: int = DEFAULT_GRID_SIZE
    height: int = DEFAULT_GRID_SIZE

    @classmethod
    def empty(cls, territory_id: str, *, grid_size: int = DEFAULT_GRID_SIZE) -> PixelCanvas:
        return cls(territory_id=territory_id, width=grid_size, height=grid_size)

    @classmethod
    def from_pixels(
        cls,
        territory_id: str,
        pixels: Iterable[Pixel],
        *,
        filled_pixels: int | None = None,
        bounds: GeoBounds | None = None,
        width: int = DEFAULT_GRID_SIZE,
        height: int = DEFAULT_GRID_SIZE,
    ) -> PixelCanvas:
        return cls(
            territory_id=territory_id,
            pixels=_unique_pixels(pixels),
            filled_pixels=filled_pixels,
            bounds=bounds,
            width=width,
            height=height,
        )

    @property
    def has_pixels(self) -> bool:
        return len(self.pixels) > 0

    @property
    def filled_count(self) -> int:
        if self.filled_pixels is not None and self.filled_pixels > 0:
            return self.filled_pixels
        return len(self.pixels)

    def merge(self, pixels: Iterable[Pixel]) -> PixelCanvas:
        """Apply a delta of edited pixels; later edits replace earlier ones."""

        merged = _unique_pixels((*self.pixels, *pixels))
        return replace(self, pixels=merged, filled_pixels=None)

    def pixel_map(self) -> Mapping[tuple[int, int], Pixel]:
        return {(pixel.x, pixel.y): pixel for pixel in self.pixels}


def _unique_pixels(pixels: Iterable[Pixel]) -> tuple[Pixel, ...]:
    by_position: dict[tuple[int, int], Pixel] = {}
    for pixel in pixels:
        by_position.pop((pixel.x, pixel.y), None)
        by_position[(pixel.x, pixel.y)] = pixel
    return tuple(by_position.values())
