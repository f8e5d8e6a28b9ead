from __future__ import annotations

import asyncio

from pixelsync.adapters.geojson_surface import GeoJsonSurface
from pixelsync.config import PacingConfig
from pixelsync.domain.reconciliation import RefreshOutcome
from tests.helpers.engine import FakeScheduler, InMemoryTerritoryStore, build_test_app

PACING = PacingConfig(
    immediate_count=4,
    immediate_concurrency=2,
    idle_chunk_size=3,
    idle_concurrency=1,
    idle_delay=0.2,
)


def test_boot_runs_head_then_drains_tail_in_idle_chunks(
    store: InMemoryTerritoryStore, scheduler: FakeScheduler
) -> None:
    app = build_test_app(GeoJsonSurface(), store, scheduler, pacing=PACING)
    ids = [f"t{i}" for i in range(10)]

    async def run() -> tuple[list[RefreshOutcome], list[str], list[RefreshOutcome]]:
        head = await app.loader.boot(ids)
        reads_after_head = list(store.territory_reads)
        tail = await app.loader.wait_idle()
        return head, reads_after_head, tail

    head, reads_after_head, tail = asyncio.run(run())

    assert len(head) == 4
    assert sorted(reads_after_head) == ["t0", "t1", "t2", "t3"]
    assert len(tail) == 6
    assert sorted(store.territory_reads) == sorted(ids)
    assert scheduler.idles == [0.2, 0.2]


def test_worker_pool_respects_concurrency(
    store: InMemoryTerritoryStore, scheduler: FakeScheduler
) -> None:
    app = build_test_app(GeoJsonSurface(), store, scheduler, pacing=PACING)

    outcomes = asyncio.run(app.loader.load_batch([f"t{i}" for i in range(7)], concurrency=2))

    assert store.max_active == 2
    assert outcomes == [RefreshOutcome.NOT_FOUND] * 7


def test_boot_only_runs_once_and_skips_blank_ids(
    store: InMemoryTerritoryStore, scheduler: FakeScheduler
) -> None:
    app = build_test_app(GeoJsonSurface(), store, scheduler, pacing=PACING)

    async def run() -> list[RefreshOutcome]:
        first = await app.loader.boot(["a", "", "  ", "b", "a"])
        second = await app.loader.boot(["c"])
        return first + second

    outcomes = asyncio.run(run())

    assert len(outcomes) == 2
    assert store.territory_reads == ["a", "b"]
    assert app.loader.booted
