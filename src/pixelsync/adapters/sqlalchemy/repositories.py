"""Persistent canvas cache backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy import delete, insert, select

from pixelsync.adapters.remote_store.schema import CanvasPayload
from pixelsync.adapters.remote_store.translator import canvas_from_payload, canvas_to_payload

from .mappings import canvas_cache_table

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

    from pixelsync.domain.model import PixelCanvas

log = getLogger(__name__)


class SqlAlchemyCanvasCache:
    """Stores the last known canvas payload per territory.

    Calls run on the event loop thread; the cache is a local SQLite file, so
    each call is short. Rows that no longer parse are treated as missing.
    """

    def __init__(self, session_factory: sessionmaker[Session], *, grid_size: int = 64) -> None:
        self._session_factory = session_factory
        self._grid_size = grid_size

    async def get(self, territory_id: str) -> PixelCanvas | None:
        stmt = select(canvas_cache_table.c.payload).where(
            canvas_cache_table.c.territory_id == territory_id
        )
        with self._session_factory() as session:
            raw = session.execute(stmt).scalar_one_or_none()
        if raw is None:
            return None
        try:
            payload = CanvasPayload.model_validate_json(raw)
        except ValidationError:
            log.debug("Unreadable cached canvas for %s, ignoring", territory_id)
            return None
        return canvas_from_payload(payload, grid_size=self._grid_size)

    async def put(self, canvas: PixelCanvas) -> None:
        raw = canvas_to_payload(canvas).model_dump_json(by_alias=True)
        values = {
            "territory_id": canvas.territory_id,
            "payload": raw,
            "stored_at": datetime.now(UTC),
        }
        with self._session_factory() as session, session.begin():
            session.execute(
                delete(canvas_cache_table).where(
                    canvas_cache_table.c.territory_id == canvas.territory_id
                )
            )
            session.execute(insert(canvas_cache_table).values(**values))

    async def delete(self, territory_id: str) -> None:
        stmt = delete(canvas_cache_table).where(canvas_cache_table.c.territory_id == territory_id)
        with self._session_factory() as session, session.begin():
            session.execute(stmt)
