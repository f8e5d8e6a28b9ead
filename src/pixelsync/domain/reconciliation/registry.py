"""In-process tables of known territories and their surface mappings."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pixelsync.domain.model import SurfaceMapping, Territory

log = getLogger(__name__)


class TerritoryRegistry:
    """Owns the mapping table and the last reconciled record per territory.

    Mappings may be known before any record is (the surface loads first); they
    are attached to the record once it is registered.
    """

    def __init__(self) -> None:
        self._territories: dict[str, Territory] = {}
        self._mappings: dict[str, SurfaceMapping] = {}

    def __contains__(self, territory_id: object) -> bool:
        return territory_id in self._territories

    def __len__(self) -> int:
        return len(self._territories)

    def __iter__(self) -> Iterator[Territory]:
        return iter(list(self._territories.values()))

    def get(self, territory_id: str) -> Territory | None:
        return self._territories.get(territory_id)

    def put(self, territory: Territory) -> Territory | None:
        """Store ``territory`` and return the record it replaced."""

        if territory.surface_mapping is not None:
            self._mappings[territory.id] = territory.surface_mapping
        else:
            territory.surface_mapping = self._mappings.get(territory.id)
        previous = self._territories.get(territory.id)
        self._territories[territory.id] = territory
        return previous

    def mapping_for(self, territory_id: str) -> SurfaceMapping | None:
        return self._mappings.get(territory_id)

    def set_mapping(self, territory_id: str, mapping: SurfaceMapping) -> None:
        current = self._mappings.get(territory_id)
        if current is not None and current != mapping:
            log.debug("Replacing stale mapping for %s: %s -> %s", territory_id, current, mapping)
        self._mappings[territory_id] = mapping
        territory = self._territories.get(territory_id)
        if territory is not None:
            territory.surface_mapping = mapping
