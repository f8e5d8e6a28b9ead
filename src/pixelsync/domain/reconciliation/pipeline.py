"""Per-territory reconciliation: load, validate, publish and render.

A ``ReconciliationPipeline`` is created once by the application and owns all
mutable reconciliation state: the in-flight set, the territory registry and
the content hints received from bulk metadata. Collaborators are passed in,
so tests can drive it with in-memory fakes and a recording scheduler.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from pixelsync.domain.model import (
    OWNED_SOVEREIGNTIES,
    FromSurfaceScan,
    build_territory,
    revision_of,
)
from pixelsync.domain.ports import TransientStoreError
from pixelsync.domain.view_state import derive

from .identifiers import feature_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pixelsync.config.rendering import PacingConfig, RenderingConfig
    from pixelsync.domain.model import Territory
    from pixelsync.domain.ports import RenderingSurface, Scheduler, TerritoryStore
    from pixelsync.domain.view_state import TerritoryViewState

    from .cache_tiers import CacheTiers
    from .identifiers import IdentifierResolver
    from .overlay import OverlayLifecycleManager
    from .registry import TerritoryRegistry

log = getLogger(__name__)

_OWNER_PROPERTIES = ("owner", "ownerId", "ruler")


class RefreshOutcome(StrEnum):
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"
    RENDERED = "rendered"
    HIDDEN = "hidden"
    PRESERVED = "preserved"
    FAILED = "failed"


@dataclass(slots=True, frozen=True, kw_only=True)
class RefreshOptions:
    force_refresh: bool = False
    preserve_derived_flag: bool = False
    expected_revision: int | None = None


class ReconciliationPipeline:
    def __init__(
        self,
        *,
        store: TerritoryStore,
        surface: RenderingSurface,
        registry: TerritoryRegistry,
        resolver: IdentifierResolver,
        cache: CacheTiers,
        overlay: OverlayLifecycleManager,
        scheduler: Scheduler,
        rendering: RenderingConfig,
        pacing: PacingConfig,
    ) -> None:
        self.store = store
        self.surface = surface
        self.registry = registry
        self.resolver = resolver
        self.cache = cache
        self.overlay = overlay
        self._scheduler = scheduler
        self._rendering = rendering
        self._pacing = pacing
        self._in_flight: dict[str, int] = {}
        self._content_hints: dict[str, float] = {}

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    async def refresh(
        self, territory_id: str, options: RefreshOptions | None = None
    ) -> RefreshOutcome:
        """Reconcile one territory. Never raises for per-territory problems."""

        opts = options or RefreshOptions()
        if territory_id in self._in_flight and not opts.force_refresh:
            log.debug("Territory %s already reconciling, skipped", territory_id)
            return RefreshOutcome.SKIPPED
        self._in_flight[territory_id] = self._in_flight.get(territory_id, 0) + 1
        try:
            return await self._reconcile(territory_id, opts)
        except Exception:
            log.exception("Reconciliation failed for territory %s", territory_id)
            return RefreshOutcome.FAILED
        finally:
            self._release(territory_id)

    def _release(self, territory_id: str) -> None:
        remaining = self._in_flight[territory_id] - 1
        if remaining:
            self._in_flight[territory_id] = remaining
        else:
            del self._in_flight[territory_id]

    async def refresh_many(
        self,
        territory_ids: Iterable[str],
        *,
        batch_size: int | None = None,
        options: RefreshOptions | None = None,
    ) -> list[RefreshOutcome]:
        """Reconcile in fixed-size concurrent chunks, pausing between chunks."""

        size = batch_size if batch_size is not None else self._pacing.batch_size
        if size <= 0:
            raise ValueError("batch_size must be positive")
        ids = list(territory_ids)
        outcomes: list[RefreshOutcome] = []
        for start in range(0, len(ids), size):
            if start:
                await self._scheduler.sleep(self._pacing.batch_delay)
            chunk = ids[start : start + size]
            outcomes.extend(
                await asyncio.gather(*(self.refresh(territory_id, options) for territory_id in chunk))
            )
        return outcomes

    def mark_content_available(self, territory_ids: Iterable[str]) -> None:
        marked_at = self._scheduler.now()
        for territory_id in territory_ids:
            self._content_hints[territory_id] = marked_at

    def has_content_hint(self, territory_id: str) -> bool:
        marked_at = self._content_hints.get(territory_id)
        if marked_at is None:
            return False
        if self._scheduler.now() - marked_at >= self._rendering.content_hint_ttl_seconds:
            del self._content_hints[territory_id]
            return False
        return True

    def viewport_territory_ids(self) -> list[str]:
        return self.resolver.territory_ids(self.surface.query_rendered_features())

    async def initial_load(self) -> list[RefreshOutcome]:
        """Map every loaded feature, then reconcile owned and painted territories.

        Territories in the current viewport go first. Safe to call again after a
        failed attempt.
        """

        self.resolver.establish_all()
        try:
            owned = await self.store.query_territories(OWNED_SOVEREIGNTIES)
            painted = await self.store.query_canvases_with_content()
        except TransientStoreError as exc:
            log.warning("Initial load could not list territories: %s", exc)
            return []

        candidates: dict[str, None] = {}
        for territory in owned:
            self.registry.put(territory)
            candidates.setdefault(territory.id, None)
        for territory_id in painted:
            candidates.setdefault(territory_id, None)

        visible = set(self.viewport_territory_ids())
        first = [territory_id for territory_id in candidates if territory_id in visible]
        rest = [territory_id for territory_id in candidates if territory_id not in visible]
        log.info(
            "Initial load: %s territories (%s in viewport, %s deferred)",
            len(candidates),
            len(first),
            len(rest),
        )
        outcomes = await self.refresh_many(first)
        outcomes.extend(await self.refresh_many(rest))
        return outcomes

    async def _reconcile(self, territory_id: str, opts: RefreshOptions) -> RefreshOutcome:
        if opts.force_refresh:
            await self.cache.invalidate(territory_id)

        previous = self.registry.get(territory_id)
        snapshot = previous.copy() if previous is not None else None
        territory = await self._load_territory(territory_id, previous, opts.expected_revision)
        if territory is None:
            log.debug("Territory %s not found in store or on surface", territory_id)
            return RefreshOutcome.NOT_FOUND

        if (
            not opts.force_refresh
            and snapshot is not None
            and territory.ownership_differs(snapshot)
        ):
            log.info(
                "Ownership of %s changed (%s/%s -> %s/%s), dropping cached canvas",
                territory_id,
                snapshot.owner_ref,
                snapshot.sovereignty,
                territory.owner_ref,
                territory.sovereignty,
            )
            await self.cache.invalidate(territory_id)

        canvas = await self.cache.load(territory_id, force_refresh=opts.force_refresh)
        view_state = derive(territory, canvas)

        preserved = (
            opts.preserve_derived_flag
            and not view_state.has_content
            and self.has_content_hint(territory_id)
        )
        if preserved:
            view_state = view_state.preserving_content()

        self._publish(territory, view_state)

        if preserved:
            log.debug("Kept earlier content signal for %s, overlay untouched", territory_id)
            return RefreshOutcome.PRESERVED
        if view_state.should_render and await self.overlay.show(territory, canvas):
            return RefreshOutcome.RENDERED
        if not view_state.should_render:
            await self.overlay.hide(territory_id)
        return RefreshOutcome.HIDDEN

    async def _load_territory(
        self,
        territory_id: str,
        previous: Territory | None,
        expected_revision: int | None,
    ) -> Territory | None:
        territory = await self._fetch_remote(territory_id)
        if territory is not None and expected_revision is not None:
            revision = revision_of(territory.provenance)
            if revision is not None and revision < expected_revision:
                log.debug(
                    "Territory %s at revision %s, expected %s; re-reading",
                    territory_id,
                    revision,
                    expected_revision,
                )
                await self._scheduler.sleep(self._pacing.batch_delay)
                territory = await self._fetch_remote(territory_id) or territory

        if territory is not None:
            if previous is not None:
                territory.surface_mapping = territory.surface_mapping or previous.surface_mapping
                territory.geometry = territory.geometry or previous.geometry
                territory.name = territory.name or previous.name
        elif previous is not None:
            territory = previous
        else:
            territory = self._synthesize_from_surface(territory_id)
            if territory is None:
                return None

        self.registry.put(territory)
        return territory

    async def _fetch_remote(self, territory_id: str) -> Territory | None:
        try:
            return await self.store.get_territory(territory_id)
        except TransientStoreError as exc:
            log.debug("Territory fetch for %s failed: %s", territory_id, exc)
            return None

    def _synthesize_from_surface(self, territory_id: str) -> Territory | None:
        match = self.resolver.scan(territory_id)
        if match is None:
            return None
        mapping = match.mapping
        properties = match.feature.properties
        owner = next(
            (properties[key] for key in _OWNER_PROPERTIES if properties.get(key) is not None),
            None,
        )
        territory = build_territory(
            territory_id=territory_id,
            owner_ref=owner,
            sovereignty=properties.get("sovereignty"),
            surface_mapping=mapping,
            geometry=match.feature.geometry,
            name=feature_name(match.feature),
            provenance=FromSurfaceScan(
                surface_id=mapping.surface_id, feature_id=mapping.feature_id
            ),
        )
        self.registry.set_mapping(territory_id, mapping)
        log.debug("Synthesized territory %s from surface feature %s", territory_id, mapping)
        return territory

    def _publish(self, territory: Territory, view_state: TerritoryViewState) -> None:
        mapping = self.resolver.verify(territory)
        if mapping is None:
            log.debug("No surface mapping for %s yet, flags not published", territory.id)
            return
        if territory.geometry is None:
            feature = self.resolver.feature_at(mapping)
            if feature is not None:
                territory.geometry = feature.geometry
        self.surface.set_feature_flags(
            mapping.surface_id, mapping.feature_id, view_state.to_feature_flags()
        )
