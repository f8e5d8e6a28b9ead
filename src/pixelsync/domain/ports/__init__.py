"""Domain port definitions for adapters."""

from __future__ import annotations

from .cache import PersistentCanvasCache
from .scheduling import Scheduler
from .store import RemoteStoreError, TerritoryStore, TransientStoreError
from .surface import (
    RenderingSurface,
    ResourceConflictError,
    ResourceMissingError,
    SurfaceFeature,
    SurfaceResourceError,
)

__all__ = [
    "PersistentCanvasCache",
    "RemoteStoreError",
    "RenderingSurface",
    "ResourceConflictError",
    "ResourceMissingError",
    "Scheduler",
    "SurfaceFeature",
    "SurfaceResourceError",
    "TerritoryStore",
    "TransientStoreError",
]
