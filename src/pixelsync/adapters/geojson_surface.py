"""Headless rendering surface over GeoJSON feature collections.

Mirrors the behaviour of a web map closely enough for the engine to run
against it: adding a resource whose id exists fails, removing a missing one
fails, a source cannot be removed while a layer still reads from it, and
features without an ``id`` get sequential ids on every load.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pixelsync.domain.model import GeoBounds
from pixelsync.domain.ports import ResourceConflictError, ResourceMissingError, SurfaceFeature

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ImageSource:
    image_id: str
    coordinates: list[list[float]]


@dataclass(slots=True, frozen=True)
class SurfaceLayer:
    layer_id: str
    kind: str
    source_id: str | None = None
    opacity: float = 1.0
    fade_duration: int = 0


class GeoJsonSurface:
    def __init__(self) -> None:
        self._collections: dict[str, list[SurfaceFeature]] = {}
        self._flags: dict[tuple[str, str], dict[str, object]] = {}
        self.images: dict[str, bytes] = {}
        self.sources: dict[str, ImageSource] = {}
        self.layers: list[SurfaceLayer] = []
        self.repaint_count = 0
        self._viewport: GeoBounds | None = None

    @classmethod
    def from_files(cls, paths: Iterable[Path]) -> GeoJsonSurface:
        surface = cls()
        for path in paths:
            with path.open(encoding="utf-8") as handle:
                surface.load_collection(path.stem, json.load(handle))
        return surface

    def load_collection(self, surface_id: str, collection: Mapping[str, Any]) -> None:
        """Load (or reload) a collection and its base fill layer."""

        features: list[SurfaceFeature] = []
        for index, raw in enumerate(collection.get("features") or []):
            native_id = raw.get("id")
            features.append(
                SurfaceFeature(
                    surface_id=surface_id,
                    feature_id=str(native_id) if native_id is not None else str(index),
                    properties=dict(raw.get("properties") or {}),
                    geometry=raw.get("geometry"),
                )
            )
        self._collections[surface_id] = features
        fill_layer = f"{surface_id}-fill"
        if not self.has_layer(fill_layer):
            self.layers.append(SurfaceLayer(layer_id=fill_layer, kind="fill"))
        log.debug("Loaded %s features into %s", len(features), surface_id)

    def set_viewport(self, bounds: GeoBounds | None) -> None:
        self._viewport = bounds

    def layer_ids(self) -> list[str]:
        return [layer.layer_id for layer in self.layers]

    def export_overlays(self, directory: Path) -> list[Path]:
        directory.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for image_id, png in sorted(self.images.items()):
            path = directory / f"{image_id}.png"
            path.write_bytes(png)
            written.append(path)
        return written

    # RenderingSurface

    def feature_collections(self) -> list[str]:
        return list(self._collections)

    def features(self, surface_id: str) -> Sequence[SurfaceFeature]:
        return tuple(self._collections.get(surface_id, ()))

    def set_feature_flags(
        self, surface_id: str, feature_id: str, flags: Mapping[str, object]
    ) -> None:
        self._flags.setdefault((surface_id, feature_id), {}).update(flags)

    def get_feature_flags(self, surface_id: str, feature_id: str) -> Mapping[str, object]:
        return dict(self._flags.get((surface_id, feature_id), {}))

    def has_image(self, image_id: str) -> bool:
        return image_id in self.images

    def add_image(self, image_id: str, png: bytes) -> None:
        if image_id in self.images:
            raise ResourceConflictError(f"Image {image_id} already exists")
        self.images[image_id] = png

    def remove_image(self, image_id: str) -> None:
        if self.images.pop(image_id, None) is None:
            raise ResourceMissingError(f"Image {image_id} does not exist")

    def has_source(self, source_id: str) -> bool:
        return source_id in self.sources

    def add_image_source(
        self, source_id: str, *, image_id: str, coordinates: list[list[float]]
    ) -> None:
        if source_id in self.sources:
            raise ResourceConflictError(f"Source {source_id} already exists")
        if image_id not in self.images:
            raise ResourceMissingError(f"Image {image_id} does not exist")
        self.sources[source_id] = ImageSource(image_id=image_id, coordinates=coordinates)

    def remove_source(self, source_id: str) -> None:
        if source_id not in self.sources:
            raise ResourceMissingError(f"Source {source_id} does not exist")
        users = [layer.layer_id for layer in self.layers if layer.source_id == source_id]
        if users:
            raise ResourceConflictError(f"Source {source_id} is used by {', '.join(users)}")
        del self.sources[source_id]

    def has_layer(self, layer_id: str) -> bool:
        return any(layer.layer_id == layer_id for layer in self.layers)

    def add_raster_layer(
        self,
        layer_id: str,
        *,
        source_id: str,
        opacity: float = 1.0,
        fade_duration: int = 0,
        before: str | None = None,
    ) -> None:
        if self.has_layer(layer_id):
            raise ResourceConflictError(f"Layer {layer_id} already exists")
        if source_id not in self.sources:
            raise ResourceMissingError(f"Source {source_id} does not exist")
        layer = SurfaceLayer(
            layer_id=layer_id,
            kind="raster",
            source_id=source_id,
            opacity=opacity,
            fade_duration=fade_duration,
        )
        if before is None:
            self.layers.append(layer)
            return
        ids = self.layer_ids()
        if before not in ids:
            raise ResourceMissingError(f"Layer {before} does not exist")
        self.layers.insert(ids.index(before), layer)

    def remove_layer(self, layer_id: str) -> None:
        for index, layer in enumerate(self.layers):
            if layer.layer_id == layer_id:
                del self.layers[index]
                return
        raise ResourceMissingError(f"Layer {layer_id} does not exist")

    def trigger_repaint(self) -> None:
        self.repaint_count += 1

    def viewport_bounds(self) -> GeoBounds | None:
        return self._viewport

    def query_rendered_features(self) -> Sequence[SurfaceFeature]:
        rendered: list[SurfaceFeature] = []
        for features in self._collections.values():
            for feature in features:
                if self._viewport is None:
                    rendered.append(feature)
                    continue
                bounds = GeoBounds.from_geometry(feature.geometry)
                if bounds is not None and bounds.intersects(self._viewport):
                    rendered.append(feature)
        return rendered
