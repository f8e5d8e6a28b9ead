from __future__ import annotations

import asyncio

from pixelsync.adapters.geojson_surface import GeoJsonSurface
from pixelsync.domain.reconciliation import OverlayResourceIds, RefreshOutcome
from tests.helpers.engine import (
    FakeScheduler,
    InMemoryCanvasCache,
    InMemoryTerritoryStore,
    build_test_app,
    make_canvas,
)


def test_content_saved_forces_fresh_read(
    surface: GeoJsonSurface, store: InMemoryTerritoryStore, scheduler: FakeScheduler
) -> None:
    persistent = InMemoryCanvasCache()
    store.add_territory("france")
    store.canvases["france"] = make_canvas("france")
    app = build_test_app(surface, store, scheduler, persistent=persistent)
    asyncio.run(app.events.territory_selected("france"))

    outcome = asyncio.run(app.events.content_saved("france"))

    assert outcome is RefreshOutcome.RENDERED
    assert store.canvas_reads == ["france", "france"]
    assert app.events.last_selected == "france"


def test_layer_added_refreshes_every_feature_of_the_layer(
    surface: GeoJsonSurface, store: InMemoryTerritoryStore, scheduler: FakeScheduler
) -> None:
    store.add_territory("france")
    store.add_territory("spain")
    app = build_test_app(surface, store, scheduler)

    outcomes = asyncio.run(app.events.layer_added("countries"))
    explicit = asyncio.run(app.events.layer_added("countries", ["spain", ""]))

    assert len(outcomes) == 2
    assert len(explicit) == 1
    assert sorted(store.territory_reads) == ["france", "spain", "spain"]


def test_ownership_changed_passes_revision(
    surface: GeoJsonSurface, store: InMemoryTerritoryStore, scheduler: FakeScheduler
) -> None:
    store.add_territory("france", revision=1)
    app = build_test_app(surface, store, scheduler)

    asyncio.run(app.events.ownership_changed("france", expected_revision=2))

    assert store.territory_reads == ["france", "france"]


def test_metadata_available_publishes_hints_then_boots(
    surface: GeoJsonSurface, store: InMemoryTerritoryStore, scheduler: FakeScheduler
) -> None:
    store.add_territory("france")
    store.add_territory("spain")
    app = build_test_app(surface, store, scheduler)
    app.pipeline.resolver.establish_all()

    outcomes = asyncio.run(app.events.metadata_available({"france": 12, "spain": 0}))

    assert outcomes == [RefreshOutcome.PRESERVED]
    assert app.loader.booted
    assert surface.get_feature_flags("countries", "101")["has_content"] is True
    assert surface.get_feature_flags("countries", "102") == {}
    assert not surface.has_layer(OverlayResourceIds.for_territory("france").layer_id)


def test_metadata_after_boot_refreshes_in_batches(
    surface: GeoJsonSurface, store: InMemoryTerritoryStore, scheduler: FakeScheduler
) -> None:
    store.add_territory("france")
    store.canvases["france"] = make_canvas("france")
    app = build_test_app(surface, store, scheduler)
    asyncio.run(app.loader.boot([]))
    asyncio.run(app.events.territory_selected("france"))

    outcomes = asyncio.run(app.events.metadata_available({"france": 1}))

    assert outcomes == [RefreshOutcome.RENDERED]
    assert store.territory_reads == ["france", "france", "france"]
