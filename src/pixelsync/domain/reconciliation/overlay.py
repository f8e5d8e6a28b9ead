"""Overlay lifecycle on the rendering surface.

Overlays are replaced, never updated in place: the old layer, image and source
are removed (in that order) before the new ones are added. Surfaces reject
adding a resource whose id is still registered, so every change to one
territory's overlay runs under that territory's lock; overlapping refreshes
of the same id apply in turn and the last one wins.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pixelsync.domain.ports import ResourceMissingError

from .raster import rasterize, resolve_bounds

if TYPE_CHECKING:
    from collections.abc import Callable

    from pixelsync.config.rendering import PacingConfig, RenderingConfig
    from pixelsync.domain.model import PixelCanvas, Territory
    from pixelsync.domain.ports import RenderingSurface, Scheduler

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class OverlayResourceIds:
    layer_id: str
    image_id: str
    source_id: str

    @classmethod
    def for_territory(cls, territory_id: str) -> OverlayResourceIds:
        return cls(
            layer_id=f"pixel-overlay-{territory_id}",
            image_id=f"pixel-overlay-{territory_id}",
            source_id=f"pixel-source-{territory_id}",
        )


class OverlayLifecycleManager:
    def __init__(
        self,
        *,
        surface: RenderingSurface,
        scheduler: Scheduler,
        rendering: RenderingConfig,
        pacing: PacingConfig,
    ) -> None:
        self._surface = surface
        self._scheduler = scheduler
        self._rendering = rendering
        self._pacing = pacing
        self._images: dict[str, bytes] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def cached_image(self, territory_id: str) -> bytes | None:
        return self._images.get(territory_id)

    async def show(self, territory: Territory, canvas: PixelCanvas) -> bool:
        """Build or rebuild the overlay; returns whether an overlay is now shown."""

        async with self._lock_for(territory.id):
            return await self._show(territory, canvas)

    async def hide(self, territory_id: str) -> None:
        async with self._lock_for(territory_id):
            self._hide(territory_id)

    async def _show(self, territory: Territory, canvas: PixelCanvas) -> bool:
        if not territory.has_owner:
            log.debug("Territory %s has no owner, hiding overlay", territory.id)
            self._hide(territory.id)
            return False

        png = rasterize(canvas, cell_scale=self._rendering.cell_scale)
        bounds = resolve_bounds(territory, canvas)
        if bounds is None:
            log.debug("No bounds for territory %s, overlay skipped", territory.id)
            return False

        ids = OverlayResourceIds.for_territory(territory.id)
        self._remove_resources(ids)
        await self._scheduler.sleep(self._pacing.settle_delay)

        self._surface.add_image(ids.image_id, png)
        self._surface.add_image_source(
            ids.source_id, image_id=ids.image_id, coordinates=bounds.corners()
        )
        before = self._fill_layer_id(territory)
        if before is not None and self._surface.has_layer(before):
            self._surface.add_raster_layer(
                ids.layer_id, source_id=ids.source_id, opacity=1.0, fade_duration=0, before=before
            )
        else:
            self._surface.add_raster_layer(
                ids.layer_id, source_id=ids.source_id, opacity=1.0, fade_duration=0
            )
        self._images[territory.id] = png

        self._surface.trigger_repaint()
        await self._scheduler.sleep(self._pacing.repaint_delay)
        self._surface.trigger_repaint()
        log.debug("Overlay shown for %s (%s pixels)", territory.id, len(canvas.pixels))
        return True

    def _hide(self, territory_id: str) -> None:
        self._remove_resources(OverlayResourceIds.for_territory(territory_id))
        self._images.pop(territory_id, None)
        self._surface.trigger_repaint()

    def _remove_resources(self, ids: OverlayResourceIds) -> None:
        _remove_quietly(self._surface.has_layer, self._surface.remove_layer, ids.layer_id)
        _remove_quietly(self._surface.has_image, self._surface.remove_image, ids.image_id)
        _remove_quietly(self._surface.has_source, self._surface.remove_source, ids.source_id)

    def _lock_for(self, territory_id: str) -> asyncio.Lock:
        return self._locks.setdefault(territory_id, asyncio.Lock())

    def _fill_layer_id(self, territory: Territory) -> str | None:
        if territory.surface_mapping is None:
            return None
        return f"{territory.surface_mapping.surface_id}{self._rendering.fill_layer_suffix}"


def _remove_quietly(
    exists: Callable[[str], bool], remove: Callable[[str], None], resource_id: str
) -> None:
    if not exists(resource_id):
        return
    try:
        remove(resource_id)
    except ResourceMissingError:
        log.debug("Resource %s already gone", resource_id)
