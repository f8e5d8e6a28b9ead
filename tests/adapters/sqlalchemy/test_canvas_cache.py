from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import insert

from pixelsync.adapters.sqlalchemy import SqlAlchemyCanvasCache, canvas_cache_table
from pixelsync.domain.model import GeoBounds, Pixel, PixelCanvas
from pixelsync.domain.ports import PersistentCanvasCache

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker


def _canvas(color: str) -> PixelCanvas:
    return PixelCanvas.from_pixels(
        "france",
        [
            Pixel(
                x=3,
                y=4,
                color=color,
                last_editor="alice",
                last_edited_at=datetime(2024, 5, 1, tzinfo=UTC),
            )
        ],
        filled_pixels=9,
        bounds=GeoBounds(west=1, south=2, east=3, north=4),
    )


def test_put_then_get_restores_canvas(sqlite_session_factory: sessionmaker[Session]) -> None:
    cache = SqlAlchemyCanvasCache(sqlite_session_factory)

    asyncio.run(cache.put(_canvas("#ff0000")))
    restored = asyncio.run(cache.get("france"))

    assert isinstance(cache, PersistentCanvasCache)
    assert restored == _canvas("#ff0000")


def test_put_replaces_existing_entry(sqlite_session_factory: sessionmaker[Session]) -> None:
    cache = SqlAlchemyCanvasCache(sqlite_session_factory)

    asyncio.run(cache.put(_canvas("#ff0000")))
    asyncio.run(cache.put(_canvas("#00ff00")))
    restored = asyncio.run(cache.get("france"))

    assert restored is not None
    assert restored.pixels[0].color == "#00ff00"


def test_delete_and_missing(sqlite_session_factory: sessionmaker[Session]) -> None:
    cache = SqlAlchemyCanvasCache(sqlite_session_factory)
    asyncio.run(cache.put(_canvas("#ff0000")))

    asyncio.run(cache.delete("france"))
    asyncio.run(cache.delete("never-stored"))

    assert asyncio.run(cache.get("france")) is None


def test_unreadable_entry_is_a_miss(sqlite_session_factory: sessionmaker[Session]) -> None:
    with sqlite_session_factory() as session, session.begin():
        session.execute(
            insert(canvas_cache_table).values(
                territory_id="france", payload="{not json", stored_at=datetime.now(UTC)
            )
        )

    assert asyncio.run(SqlAlchemyCanvasCache(sqlite_session_factory).get("france")) is None
