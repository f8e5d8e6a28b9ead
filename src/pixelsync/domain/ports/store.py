"""Port for the authoritative territory and canvas store.

Absent records are returned as ``None``. Only transport-level trouble is
raised, as ``TransientStoreError``, so callers never confuse "nothing there"
with "could not ask".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pixelsync.domain.model import PixelCanvas, Sovereignty, Territory


class RemoteStoreError(RuntimeError):
    """Raised when the territory store returns an unexpected response."""


class TransientStoreError(RemoteStoreError):
    """Raised when the territory store could not be reached or failed temporarily."""


@runtime_checkable
class TerritoryStore(Protocol):
    async def get_territory(self, territory_id: str) -> Territory | None: ...

    async def set_territory(self, territory: Territory) -> None: ...

    async def get_canvas(self, territory_id: str) -> PixelCanvas | None: ...

    async def set_canvas(self, canvas: PixelCanvas) -> None: ...

    async def query_territories(self, sovereignties: Iterable[Sovereignty]) -> list[Territory]: ...

    async def query_canvases_with_content(self) -> list[str]: ...


__all__ = ["RemoteStoreError", "TerritoryStore", "TransientStoreError"]
