"""Port for the persistent local canvas cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pixelsync.domain.model import PixelCanvas


@runtime_checkable
class PersistentCanvasCache(Protocol):
    """Canvas cache that survives restarts; unreadable entries read as ``None``."""

    async def get(self, territory_id: str) -> PixelCanvas | None: ...

    async def put(self, canvas: PixelCanvas) -> None: ...

    async def delete(self, territory_id: str) -> None: ...


__all__ = ["PersistentCanvasCache"]
