"""Read-through canvas cache: memory, then local persistence, then the store."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pixelsync.domain.model import PixelCanvas
from pixelsync.domain.ports import TransientStoreError

if TYPE_CHECKING:
    from pixelsync.domain.ports import PersistentCanvasCache, Scheduler, TerritoryStore

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class _MemoryEntry:
    canvas: PixelCanvas
    stored_at: float


class CacheTiers:
    """Tiered canvas access.

    Reads stop at the first tier that answers. Store misses and store failures
    both read as an empty canvas and are not cached, so the next pass asks the
    store again. Writes go through every tier before returning.
    """

    def __init__(
        self,
        *,
        store: TerritoryStore,
        persistent: PersistentCanvasCache,
        scheduler: Scheduler,
        memory_ttl_seconds: float = 60.0,
        grid_size: int = 64,
    ) -> None:
        self._store = store
        self._persistent = persistent
        self._scheduler = scheduler
        self._ttl = memory_ttl_seconds
        self._grid_size = grid_size
        self._memory: dict[str, _MemoryEntry] = {}

    async def load(self, territory_id: str, *, force_refresh: bool = False) -> PixelCanvas:
        if not force_refresh:
            cached = self._memory_get(territory_id)
            if cached is not None:
                return cached

            persisted = await self._persistent.get(territory_id)
            if persisted is not None:
                self._memory_put(persisted)
                return persisted

        try:
            canvas = await self._store.get_canvas(territory_id)
        except TransientStoreError as exc:
            log.debug("Canvas fetch for %s failed, treating as empty: %s", territory_id, exc)
            return self._empty(territory_id)
        if canvas is None:
            log.debug("No canvas stored for %s", territory_id)
            return self._empty(territory_id)

        await self._persistent.put(canvas)
        self._memory_put(canvas)
        return canvas

    async def save(self, territory_id: str, canvas: PixelCanvas) -> None:
        if canvas.territory_id != territory_id:
            raise ValueError(
                f"Canvas belongs to {canvas.territory_id!r}, not {territory_id!r}"
            )
        await self._store.set_canvas(canvas)
        await self._persistent.put(canvas)
        self._memory_put(canvas)

    async def invalidate(self, territory_id: str) -> None:
        self._memory.pop(territory_id, None)
        await self._persistent.delete(territory_id)

    def _memory_get(self, territory_id: str) -> PixelCanvas | None:
        entry = self._memory.get(territory_id)
        if entry is None:
            return None
        if self._scheduler.now() - entry.stored_at >= self._ttl:
            del self._memory[territory_id]
            return None
        return entry.canvas

    def _memory_put(self, canvas: PixelCanvas) -> None:
        self._memory[canvas.territory_id] = _MemoryEntry(canvas, self._scheduler.now())

    def _empty(self, territory_id: str) -> PixelCanvas:
        return PixelCanvas.empty(territory_id, grid_size=self._grid_size)
