"""Rendering and pacing configuration.

Defaults match the map client: a 64x64 pixel grid drawn at 8 screen pixels per
cell, a one minute memory cache window and small batches spaced 50 ms apart so
the territory store is never hit with hundreds of requests at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_float, optional_int

DEFAULT_GRID_SIZE: Final[int] = 64
DEFAULT_CELL_SCALE: Final[int] = 8
DEFAULT_NAMESPACE_PREFIX: Final[str] = "world-"
FILL_LAYER_SUFFIX: Final[str] = "-fill"


@dataclass(frozen=True, slots=True, kw_only=True)
class RenderingConfig:
    grid_size: int = DEFAULT_GRID_SIZE
    cell_scale: int = DEFAULT_CELL_SCALE
    memory_ttl_seconds: float = 60.0
    namespace_prefix: str = DEFAULT_NAMESPACE_PREFIX
    fill_layer_suffix: str = FILL_LAYER_SUFFIX
    content_hint_ttl_seconds: float = 30.0


@dataclass(frozen=True, slots=True, kw_only=True)
class PacingConfig:
    """Named delays and batch sizes used by reconciliation scheduling."""

    batch_size: int = 10
    batch_delay: float = 0.05
    settle_delay: float = 0.15
    repaint_delay: float = 0.05
    immediate_count: int = 60
    immediate_concurrency: int = 6
    idle_chunk_size: int = 15
    idle_concurrency: int = 3
    idle_delay: float = 0.2
    metadata_batch_size: int = 150


def get_rendering_config() -> RenderingConfig:
    return RenderingConfig(
        grid_size=optional_int("PIXELSYNC_GRID_SIZE", DEFAULT_GRID_SIZE),
        cell_scale=optional_int("PIXELSYNC_CELL_SCALE", DEFAULT_CELL_SCALE),
        memory_ttl_seconds=optional_float("PIXELSYNC_MEMORY_TTL_SECONDS", 60.0),
        content_hint_ttl_seconds=optional_float("PIXELSYNC_CONTENT_HINT_TTL_SECONDS", 30.0),
    )


def get_pacing_config() -> PacingConfig:
    return PacingConfig(
        batch_size=optional_int("PIXELSYNC_BATCH_SIZE", 10),
        batch_delay=optional_float("PIXELSYNC_BATCH_DELAY", 0.05),
        immediate_count=optional_int("PIXELSYNC_IMMEDIATE_COUNT", 60),
        immediate_concurrency=optional_int("PIXELSYNC_IMMEDIATE_CONCURRENCY", 6),
    )
