"""Engine lifecycle for the persistent canvas cache."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from pixelsync.config.storage import get_database_config

from .mappings import create_all_tables

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the canvas cache database is used before ``startup`` or started twice."""


@dataclass(slots=True)
class _CacheDatabase:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None


_DATABASE = _CacheDatabase()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Open the cache database and make sure the cache table exists."""

    if _DATABASE.engine is not None and not force:
        raise StartupError("Canvas cache already started; pass force=True to switch databases")

    resolved = engine or create_engine(database_uri or get_database_config().uri, future=True)
    create_all_tables(resolved)
    _DATABASE.engine = resolved
    _DATABASE.sessions = sessionmaker(bind=resolved, expire_on_commit=False)
    log.debug("Canvas cache database: %s", resolved.url.render_as_string(hide_password=True))


def is_started() -> bool:
    return _DATABASE.engine is not None


def session_factory() -> sessionmaker[Session]:
    if _DATABASE.sessions is None:
        raise StartupError("Canvas cache not started; call startup() before opening it")
    return _DATABASE.sessions


def shutdown() -> None:
    """Dispose the engine and forget it (used between tests)."""

    if _DATABASE.engine is not None:
        _DATABASE.engine.dispose()
    _DATABASE.engine = None
    _DATABASE.sessions = None
