"""Where pixelsync keeps its local files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "pixelsync"
DEFAULT_CACHE_DB_FILENAME: Final[str] = "canvas_cache.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local data directory holding the canvas cache and the HTTP listing cache.

    Path accessors create the directory on first use.
    """

    data_dir: Path

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def file(self, filename: str) -> Path:
        directory = self.resolve_data_dir()
        directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def canvas_cache_path(self) -> Path:
        return self.file(DEFAULT_CACHE_DB_FILENAME)

    def http_cache_path(self) -> Path:
        return self.file(HTTP_CACHE_FILENAME)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    if override := os.getenv("PIXELSYNC_DATA_DIR"):
        return StorageConfig(data_dir=Path(override))
    xdg_data_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
    return StorageConfig(data_dir=base / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """Canvas cache database: ``PIXELSYNC_CACHE_URI`` or a SQLite file in the data dir."""

    if uri := os.getenv("PIXELSYNC_CACHE_URI"):
        return DatabaseConfig(uri=uri)
    path = (storage or get_storage_config()).canvas_cache_path()
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{path}")
