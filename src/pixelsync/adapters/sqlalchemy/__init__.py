"""SQLAlchemy adapter package for the persistent canvas cache."""

from __future__ import annotations

from .mappings import canvas_cache_table, create_all_tables, metadata
from .repositories import SqlAlchemyCanvasCache
from .session import StartupError, is_started, session_factory, shutdown, startup

__all__ = [
    "SqlAlchemyCanvasCache",
    "StartupError",
    "canvas_cache_table",
    "create_all_tables",
    "is_started",
    "metadata",
    "session_factory",
    "shutdown",
    "startup",
]
