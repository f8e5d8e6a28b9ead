"""Port for the interactive map that displays territories."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from pixelsync.domain.model import GeoBounds


class SurfaceResourceError(RuntimeError):
    """Base class for rendering surface resource failures."""


class ResourceMissingError(SurfaceResourceError):
    """Raised when removing an image, source or layer that does not exist."""


class ResourceConflictError(SurfaceResourceError):
    """Raised when adding an image, source or layer whose id is already taken."""


@dataclass(slots=True, frozen=True, kw_only=True)
class SurfaceFeature:
    """One feature as currently loaded by the surface.

    ``feature_id`` is the surface's own id and may change between loads.
    """

    surface_id: str
    feature_id: str | None
    properties: Mapping[str, Any] = field(default_factory=dict)
    geometry: Mapping[str, Any] | None = None


@runtime_checkable
class RenderingSurface(Protocol):
    def feature_collections(self) -> Iterable[str]: ...

    def features(self, surface_id: str) -> Sequence[SurfaceFeature]: ...

    def set_feature_flags(
        self, surface_id: str, feature_id: str, flags: Mapping[str, object]
    ) -> None: ...

    def get_feature_flags(self, surface_id: str, feature_id: str) -> Mapping[str, object]: ...

    def has_image(self, image_id: str) -> bool: ...

    def add_image(self, image_id: str, png: bytes) -> None: ...

    def remove_image(self, image_id: str) -> None: ...

    def has_source(self, source_id: str) -> bool: ...

    def add_image_source(
        self, source_id: str, *, image_id: str, coordinates: list[list[float]]
    ) -> None: ...

    def remove_source(self, source_id: str) -> None: ...

    def has_layer(self, layer_id: str) -> bool: ...

    def add_raster_layer(
        self,
        layer_id: str,
        *,
        source_id: str,
        opacity: float = 1.0,
        fade_duration: int = 0,
        before: str | None = None,
    ) -> None: ...

    def remove_layer(self, layer_id: str) -> None: ...

    def trigger_repaint(self) -> None: ...

    def viewport_bounds(self) -> GeoBounds | None: ...

    def query_rendered_features(self) -> Sequence[SurfaceFeature]: ...


__all__ = [
    "RenderingSurface",
    "ResourceConflictError",
    "ResourceMissingError",
    "SurfaceFeature",
    "SurfaceResourceError",
]
