"""SQLAlchemy table metadata for the persistent canvas cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, MetaData, String, Table, Text

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

metadata = MetaData()

canvas_cache_table = Table(
    "pixel_canvas_cache",
    metadata,
    Column("territory_id", String(255), primary_key=True),
    Column("payload", Text, nullable=False),
    Column("stored_at", DateTime(timezone=True), nullable=False),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
