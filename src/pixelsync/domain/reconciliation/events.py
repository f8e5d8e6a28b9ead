"""Entry points for external events that trigger reconciliation."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .pipeline import RefreshOptions, RefreshOutcome
from .progressive import PRESERVE_CONTENT

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from pixelsync.config.rendering import PacingConfig
    from pixelsync.domain.ports import Scheduler

    from .pipeline import ReconciliationPipeline
    from .progressive import ProgressiveLoader

log = getLogger(__name__)


class TerritoryEvents:
    def __init__(
        self,
        *,
        pipeline: ReconciliationPipeline,
        loader: ProgressiveLoader,
        scheduler: Scheduler,
        pacing: PacingConfig,
    ) -> None:
        self._pipeline = pipeline
        self._loader = loader
        self._scheduler = scheduler
        self._pacing = pacing
        self.last_selected: str | None = None

    async def content_saved(self, territory_id: str) -> RefreshOutcome:
        return await self._pipeline.refresh(territory_id, RefreshOptions(force_refresh=True))

    async def ownership_changed(
        self,
        territory_id: str,
        *,
        force_refresh: bool = False,
        expected_revision: int | None = None,
    ) -> RefreshOutcome:
        return await self._pipeline.refresh(
            territory_id,
            RefreshOptions(force_refresh=force_refresh, expected_revision=expected_revision),
        )

    async def territory_selected(self, territory_id: str) -> RefreshOutcome:
        self.last_selected = territory_id
        return await self._pipeline.refresh(territory_id)

    async def layer_added(
        self, surface_id: str, feature_ids: Sequence[str] | None = None
    ) -> list[RefreshOutcome]:
        if feature_ids is None:
            features = self._pipeline.surface.features(surface_id)
            territory_ids = self._pipeline.resolver.territory_ids(features)
        else:
            territory_ids = list(dict.fromkeys(fid for fid in feature_ids if fid))
        log.debug("Layer %s added with %s territories", surface_id, len(territory_ids))
        return await self._pipeline.refresh_many(territory_ids)

    async def metadata_available(self, filled_counts: Mapping[str, int]) -> list[RefreshOutcome]:
        """Seed content flags from bulk metadata, then reconcile the hinted territories.

        ``filled_counts`` maps territory ids to their filled pixel count as
        reported before the canvases themselves are fetched.
        """

        hinted = [territory_id for territory_id, count in filled_counts.items() if count > 0]
        self._pipeline.mark_content_available(hinted)

        size = self._pacing.metadata_batch_size
        for start in range(0, len(hinted), size):
            if start:
                await self._scheduler.idle(0)
            for territory_id in hinted[start : start + size]:
                mapping = self._pipeline.registry.mapping_for(territory_id)
                if mapping is not None:
                    self._pipeline.surface.set_feature_flags(
                        mapping.surface_id, mapping.feature_id, {"has_content": True}
                    )

        if self._loader.booted:
            outcomes = await self._pipeline.refresh_many(hinted, options=PRESERVE_CONTENT)
        else:
            outcomes = await self._loader.boot(hinted)

        if self.last_selected is not None and filled_counts.get(self.last_selected, 0) > 0:
            await self._pipeline.refresh(self.last_selected, PRESERVE_CONTENT)
        return outcomes
