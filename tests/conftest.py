from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from pixelsync.adapters.geojson_surface import GeoJsonSurface
from pixelsync.adapters.sqlalchemy import create_all_tables, shutdown, startup
from tests.helpers.engine import (
    FakeScheduler,
    InMemoryCanvasCache,
    InMemoryTerritoryStore,
    feature_collection,
    square,
)

os.environ.setdefault("PIXELSYNC_CACHE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def store(scheduler: FakeScheduler) -> InMemoryTerritoryStore:
    return InMemoryTerritoryStore(timeline=scheduler.timeline)


@pytest.fixture
def persistent() -> InMemoryCanvasCache:
    return InMemoryCanvasCache()


@pytest.fixture
def surface() -> GeoJsonSurface:
    surface = GeoJsonSurface()
    surface.load_collection(
        "countries",
        feature_collection(
            [
                {"id": 101, "properties": {"id": "france", "name": "France"}, "geometry": square(2, 46)},
                {"id": 102, "properties": {"id": "spain", "name": "Spain"}, "geometry": square(-4, 40)},
            ]
        ),
    )
    return surface


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: Engine) -> Iterator[sessionmaker[Session]]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sessionmaker(bind=sqlite_engine, expire_on_commit=False)
    finally:
        shutdown()
