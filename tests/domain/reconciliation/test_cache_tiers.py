from __future__ import annotations

import asyncio

from pixelsync.domain.reconciliation import CacheTiers
from tests.helpers.engine import (
    FakeScheduler,
    InMemoryCanvasCache,
    InMemoryTerritoryStore,
    make_canvas,
)


def _tiers(
    store: InMemoryTerritoryStore, persistent: InMemoryCanvasCache, scheduler: FakeScheduler
) -> CacheTiers:
    return CacheTiers(
        store=store, persistent=persistent, scheduler=scheduler, memory_ttl_seconds=60.0
    )


def test_remote_hit_populates_lower_tiers(
    store: InMemoryTerritoryStore, persistent: InMemoryCanvasCache, scheduler: FakeScheduler
) -> None:
    store.canvases["peru"] = make_canvas("peru")
    tiers = _tiers(store, persistent, scheduler)

    first = asyncio.run(tiers.load("peru"))
    second = asyncio.run(tiers.load("peru"))

    assert first == second == store.canvases["peru"]
    assert store.canvas_reads == ["peru"]
    assert persistent.entries["peru"] == first


def test_memory_expiry_falls_back_to_persistent_tier(
    store: InMemoryTerritoryStore, persistent: InMemoryCanvasCache, scheduler: FakeScheduler
) -> None:
    persistent.entries["peru"] = make_canvas("peru", [(1, 1, "#00ff00")])
    tiers = _tiers(store, persistent, scheduler)

    asyncio.run(tiers.load("peru"))
    persistent.entries["peru"] = make_canvas("peru", [(2, 2, "#0000ff")])
    scheduler.advance(30)
    cached = asyncio.run(tiers.load("peru"))
    scheduler.advance(31)
    refreshed = asyncio.run(tiers.load("peru"))

    assert cached.pixels[0].color == "#00ff00"
    assert refreshed.pixels[0].color == "#0000ff"
    assert store.canvas_reads == []


def test_force_refresh_skips_memory_and_persistent(
    store: InMemoryTerritoryStore, persistent: InMemoryCanvasCache, scheduler: FakeScheduler
) -> None:
    persistent.entries["peru"] = make_canvas("peru", [(1, 1, "#00ff00")])
    store.canvases["peru"] = make_canvas("peru", [(3, 3, "#ffffff")])
    tiers = _tiers(store, persistent, scheduler)

    canvas = asyncio.run(tiers.load("peru", force_refresh=True))

    assert canvas.pixels[0].color == "#ffffff"
    assert persistent.entries["peru"] == canvas


def test_missing_and_failing_remote_read_as_empty_and_are_not_cached(
    store: InMemoryTerritoryStore, persistent: InMemoryCanvasCache, scheduler: FakeScheduler
) -> None:
    store.transient.add("chile")
    tiers = _tiers(store, persistent, scheduler)

    missing = asyncio.run(tiers.load("peru"))
    failing = asyncio.run(tiers.load("chile"))
    asyncio.run(tiers.load("peru"))

    assert not missing.has_pixels
    assert not failing.has_pixels
    assert persistent.entries == {}
    assert store.canvas_reads == ["peru", "chile", "peru"]


def test_save_writes_through_every_tier(
    store: InMemoryTerritoryStore, persistent: InMemoryCanvasCache, scheduler: FakeScheduler
) -> None:
    tiers = _tiers(store, persistent, scheduler)
    canvas = make_canvas("peru")

    asyncio.run(tiers.save("peru", canvas))
    loaded = asyncio.run(tiers.load("peru"))

    assert store.canvases["peru"] == canvas
    assert persistent.entries["peru"] == canvas
    assert loaded == canvas
    assert store.canvas_reads == []


def test_invalidate_forces_next_read_to_the_store(
    store: InMemoryTerritoryStore, persistent: InMemoryCanvasCache, scheduler: FakeScheduler
) -> None:
    tiers = _tiers(store, persistent, scheduler)
    asyncio.run(tiers.save("peru", make_canvas("peru", [(0, 0, "#000000")])))
    store.canvases["peru"] = make_canvas("peru", [(9, 9, "#999999")])

    asyncio.run(tiers.invalidate("peru"))
    loaded = asyncio.run(tiers.load("peru"))

    assert loaded.pixels[0].color == "#999999"
    assert store.canvas_reads == ["peru"]
    assert persistent.deleted == ["peru"]
