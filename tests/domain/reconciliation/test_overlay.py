from __future__ import annotations

import asyncio

from pixelsync.adapters.geojson_surface import GeoJsonSurface
from pixelsync.config import PacingConfig, RenderingConfig
from pixelsync.domain.model import SurfaceMapping, Territory
from pixelsync.domain.reconciliation import OverlayLifecycleManager, OverlayResourceIds
from tests.helpers.engine import FakeScheduler, make_canvas, square

IDS = OverlayResourceIds.for_territory("france")


def _manager(surface: GeoJsonSurface, scheduler: FakeScheduler) -> OverlayLifecycleManager:
    return OverlayLifecycleManager(
        surface=surface, scheduler=scheduler, rendering=RenderingConfig(), pacing=PacingConfig()
    )


def _france(owner: str | None = "alice") -> Territory:
    return Territory(
        id="france",
        owner_ref=owner,
        geometry=square(2, 46),
        surface_mapping=SurfaceMapping(surface_id="countries", feature_id="101"),
    )


def test_resource_ids() -> None:
    assert IDS == OverlayResourceIds(
        layer_id="pixel-overlay-france",
        image_id="pixel-overlay-france",
        source_id="pixel-source-france",
    )


def test_show_adds_layer_below_fill_and_repaints_twice(
    surface: GeoJsonSurface, scheduler: FakeScheduler
) -> None:
    manager = _manager(surface, scheduler)

    shown = asyncio.run(manager.show(_france(), make_canvas("france")))

    assert shown
    assert surface.layer_ids() == ["pixel-overlay-france", "countries-fill"]
    assert surface.sources[IDS.source_id].coordinates == [[2, 47], [3, 47], [3, 46], [2, 46]]
    assert surface.images[IDS.image_id] == manager.cached_image("france")
    assert scheduler.sleeps == [0.15, 0.05]
    assert surface.repaint_count == 2


def test_show_twice_leaves_exactly_one_overlay(
    surface: GeoJsonSurface, scheduler: FakeScheduler
) -> None:
    manager = _manager(surface, scheduler)

    asyncio.run(manager.show(_france(), make_canvas("france")))
    asyncio.run(manager.show(_france(), make_canvas("france")))

    assert surface.layer_ids().count(IDS.layer_id) == 1
    assert list(surface.images) == [IDS.image_id]
    assert list(surface.sources) == [IDS.source_id]


def test_show_without_fill_layer_appends(scheduler: FakeScheduler) -> None:
    surface = GeoJsonSurface()
    territory = _france()
    territory.surface_mapping = SurfaceMapping(surface_id="elsewhere", feature_id="1")

    asyncio.run(_manager(surface, scheduler).show(territory, make_canvas("france")))

    assert surface.layer_ids() == [IDS.layer_id]


def test_show_for_unowned_territory_acts_as_hide(
    surface: GeoJsonSurface, scheduler: FakeScheduler
) -> None:
    manager = _manager(surface, scheduler)
    asyncio.run(manager.show(_france(), make_canvas("france")))

    shown = asyncio.run(manager.show(_france(owner=None), make_canvas("france")))

    assert not shown
    assert not surface.has_layer(IDS.layer_id)
    assert not surface.has_image(IDS.image_id)
    assert not surface.has_source(IDS.source_id)
    assert manager.cached_image("france") is None


def test_show_without_bounds_is_skipped(surface: GeoJsonSurface, scheduler: FakeScheduler) -> None:
    territory = Territory(id="france", owner_ref="alice")

    shown = asyncio.run(_manager(surface, scheduler).show(territory, make_canvas("france")))

    assert not shown
    assert surface.images == {}


def test_hide_is_tolerant_of_missing_resources(
    surface: GeoJsonSurface, scheduler: FakeScheduler
) -> None:
    manager = _manager(surface, scheduler)

    asyncio.run(manager.hide("france"))
    asyncio.run(manager.hide("france"))

    assert surface.repaint_count == 2
    assert surface.layer_ids() == ["countries-fill"]
