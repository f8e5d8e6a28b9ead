"""Match stable territory ids against the surface's unstable feature ids."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from logging import getLogger
from typing import TYPE_CHECKING

from pixelsync.domain.model import SurfaceMapping

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pixelsync.domain.model import Territory
    from pixelsync.domain.ports import RenderingSurface, SurfaceFeature

    from .registry import TerritoryRegistry

log = getLogger(__name__)

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")


class MatchKind(IntEnum):
    """How a feature matched; lower values win."""

    DECLARED_ID = 1
    NATIVE_ID = 2
    PREFIX_STRIPPED = 3
    NAME_SLUG = 4


@dataclass(slots=True, frozen=True)
class FeatureMatch:
    feature: SurfaceFeature
    kind: MatchKind

    @property
    def mapping(self) -> SurfaceMapping:
        return SurfaceMapping(
            surface_id=self.feature.surface_id,
            feature_id=str(self.feature.feature_id),
        )


def slugify(value: str) -> str:
    text = value.strip().lower()
    text = _NON_SLUG_CHARS.sub("", text)
    text = _WHITESPACE.sub("-", text)
    text = _DASHES.sub("-", text)
    return text.strip("-")


def declared_id(feature: SurfaceFeature) -> str | None:
    value = feature.properties.get("id")
    if value in (None, ""):
        value = feature.properties.get("territoryId")
    if value in (None, ""):
        return None
    return str(value)


def feature_name(feature: SurfaceFeature) -> str | None:
    name = feature.properties.get("name") or feature.properties.get("name_en")
    return str(name) if name else None


def feature_territory_id(feature: SurfaceFeature) -> str | None:
    """Territory id a feature stands for: declared id, else native id."""

    domain_id = declared_id(feature)
    if domain_id is not None:
        return domain_id
    if feature.feature_id is None:
        return None
    return str(feature.feature_id)


class IdentifierResolver:
    """Layered feature lookup that keeps the mapping table in step with the surface."""

    def __init__(
        self,
        *,
        surface: RenderingSurface,
        registry: TerritoryRegistry,
        namespace_prefix: str = "world-",
    ) -> None:
        self._surface = surface
        self._registry = registry
        self._prefix = namespace_prefix

    def match_kind(self, feature: SurfaceFeature, territory_id: str) -> MatchKind | None:
        if feature.feature_id is None:
            return None
        domain_id = declared_id(feature)
        native_id = str(feature.feature_id)
        if domain_id == territory_id:
            return MatchKind.DECLARED_ID
        if native_id == territory_id:
            return MatchKind.NATIVE_ID
        stripped = self._strip_prefix(territory_id)
        if stripped in {
            self._strip_prefix(candidate)
            for candidate in (domain_id, native_id)
            if candidate is not None
        }:
            return MatchKind.PREFIX_STRIPPED
        name = feature_name(feature)
        if name is not None and slugify(name) == territory_id.strip().lower():
            return MatchKind.NAME_SLUG
        return None

    def scan(self, territory_id: str) -> FeatureMatch | None:
        """Best match across every loaded collection, without side effects."""

        best: FeatureMatch | None = None
        for surface_id in self._surface.feature_collections():
            for feature in self._surface.features(surface_id):
                kind = self.match_kind(feature, territory_id)
                if kind is None or (best is not None and kind >= best.kind):
                    continue
                best = FeatureMatch(feature=feature, kind=kind)
                if kind is MatchKind.DECLARED_ID:
                    return best
        return best

    def resolve(self, territory_id: str) -> SurfaceMapping | None:
        match = self.scan(territory_id)
        if match is None:
            log.debug("No surface feature matches territory %s yet", territory_id)
            return None
        mapping = match.mapping
        self._registry.set_mapping(territory_id, mapping)
        return mapping

    def verify(self, territory: Territory) -> SurfaceMapping | None:
        """Check the cached mapping against the surface and repair it if stale.

        Only a feature that still declares the territory id keeps the cached
        mapping; weaker matches go through a full ranked ``resolve``.
        """

        mapping = territory.surface_mapping or self._registry.mapping_for(territory.id)
        if mapping is not None and self._declares(mapping, territory.id):
            territory.surface_mapping = mapping
            return mapping
        resolved = self.resolve(territory.id)
        if resolved is not None:
            territory.surface_mapping = resolved
        return resolved

    def establish_all(self) -> int:
        """Register a mapping for every loaded feature that names a territory."""

        count = 0
        for surface_id in self._surface.feature_collections():
            for feature in self._surface.features(surface_id):
                territory_id = feature_territory_id(feature)
                if territory_id is None or feature.feature_id is None:
                    continue
                self._registry.set_mapping(
                    territory_id,
                    SurfaceMapping(surface_id=surface_id, feature_id=str(feature.feature_id)),
                )
                count += 1
        log.debug("Established %s territory mappings", count)
        return count

    def territory_ids(self, features: Iterable[SurfaceFeature]) -> list[str]:
        """Distinct territory ids named by ``features``, in order of appearance."""

        seen: dict[str, None] = {}
        for feature in features:
            territory_id = feature_territory_id(feature)
            if territory_id is not None:
                seen.setdefault(territory_id, None)
        return list(seen)

    def feature_at(self, mapping: SurfaceMapping) -> SurfaceFeature | None:
        if mapping.surface_id not in set(self._surface.feature_collections()):
            return None
        for feature in self._surface.features(mapping.surface_id):
            if feature.feature_id is not None and str(feature.feature_id) == mapping.feature_id:
                return feature
        return None

    def _declares(self, mapping: SurfaceMapping, territory_id: str) -> bool:
        feature = self.feature_at(mapping)
        if feature is None:
            return False
        return self.match_kind(feature, territory_id) is MatchKind.DECLARED_ID

    def _strip_prefix(self, value: str) -> str:
        if self._prefix and value.startswith(self._prefix):
            return value[len(self._prefix) :]
        return value
