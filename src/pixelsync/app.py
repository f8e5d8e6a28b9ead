"""Application wiring and orchestration entry points."""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pixelsync.adapters.remote_store import HttpTerritoryStore
from pixelsync.adapters.scheduling import AsyncioScheduler
from pixelsync.adapters.sqlalchemy import SqlAlchemyCanvasCache, is_started, session_factory, startup
from pixelsync.config import (
    get_pacing_config,
    get_remote_store_config,
    get_rendering_config,
)
from pixelsync.domain.reconciliation import (
    CacheTiers,
    IdentifierResolver,
    OverlayLifecycleManager,
    ProgressiveLoader,
    ReconciliationPipeline,
    RefreshOptions,
    TerritoryEvents,
    TerritoryRegistry,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from pixelsync.config import PacingConfig, RenderingConfig
    from pixelsync.domain.ports import (
        PersistentCanvasCache,
        RenderingSurface,
        Scheduler,
        TerritoryStore,
    )
    from pixelsync.domain.reconciliation import RefreshOutcome

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class PixelSyncApp:
    """One explicitly owned engine instance and its entry points."""

    pipeline: ReconciliationPipeline
    loader: ProgressiveLoader
    events: TerritoryEvents
    surface: RenderingSurface


def build_app(
    *,
    surface: RenderingSurface,
    store: TerritoryStore | None = None,
    persistent: PersistentCanvasCache | None = None,
    scheduler: Scheduler | None = None,
    rendering: RenderingConfig | None = None,
    pacing: PacingConfig | None = None,
) -> PixelSyncApp:
    """Assemble the engine; unspecified collaborators come from configuration."""

    rendering_config = rendering or get_rendering_config()
    pacing_config = pacing or get_pacing_config()
    effective_scheduler = scheduler or AsyncioScheduler()
    effective_store = store or HttpTerritoryStore(
        config=get_remote_store_config(), grid_size=rendering_config.grid_size
    )
    if persistent is None:
        if not is_started():
            startup()
        persistent = SqlAlchemyCanvasCache(session_factory(), grid_size=rendering_config.grid_size)

    registry = TerritoryRegistry()
    resolver = IdentifierResolver(
        surface=surface,
        registry=registry,
        namespace_prefix=rendering_config.namespace_prefix,
    )
    cache = CacheTiers(
        store=effective_store,
        persistent=persistent,
        scheduler=effective_scheduler,
        memory_ttl_seconds=rendering_config.memory_ttl_seconds,
        grid_size=rendering_config.grid_size,
    )
    overlay = OverlayLifecycleManager(
        surface=surface,
        scheduler=effective_scheduler,
        rendering=rendering_config,
        pacing=pacing_config,
    )
    pipeline = ReconciliationPipeline(
        store=effective_store,
        surface=surface,
        registry=registry,
        resolver=resolver,
        cache=cache,
        overlay=overlay,
        scheduler=effective_scheduler,
        rendering=rendering_config,
        pacing=pacing_config,
    )
    loader = ProgressiveLoader(pipeline=pipeline, scheduler=effective_scheduler, pacing=pacing_config)
    events = TerritoryEvents(
        pipeline=pipeline,
        loader=loader,
        scheduler=effective_scheduler,
        pacing=pacing_config,
    )
    return PixelSyncApp(pipeline=pipeline, loader=loader, events=events, surface=surface)


def refresh_territories(
    territory_ids: Iterable[str],
    *,
    surface: RenderingSurface,
    force_refresh: bool = False,
    app_factory: Callable[[RenderingSurface], PixelSyncApp] | None = None,
) -> list[RefreshOutcome]:
    """Reconcile the given territories against the configured store."""

    app = (app_factory or _default_app)(surface)
    ids = list(territory_ids)
    log.info("Refreshing %s territories (force=%s)", len(ids), force_refresh)
    options = RefreshOptions(force_refresh=force_refresh)
    return _run_and_report(app.pipeline.refresh_many(ids, options=options))


def load_all_territories(
    *,
    surface: RenderingSurface,
    app_factory: Callable[[RenderingSurface], PixelSyncApp] | None = None,
) -> list[RefreshOutcome]:
    """Map every loaded feature and reconcile owned or painted territories."""

    app = (app_factory or _default_app)(surface)
    return _run_and_report(app.pipeline.initial_load())


def boot_territories(
    territory_ids: Iterable[str],
    *,
    surface: RenderingSurface,
    app_factory: Callable[[RenderingSurface], PixelSyncApp] | None = None,
) -> list[RefreshOutcome]:
    """Progressively reconcile ``territory_ids`` and wait for the deferred tail."""

    app = (app_factory or _default_app)(surface)
    ids = list(territory_ids)

    async def run() -> list[RefreshOutcome]:
        outcomes = await app.loader.boot(ids)
        outcomes.extend(await app.loader.wait_idle())
        return outcomes

    return _run_and_report(run())


def _default_app(surface: RenderingSurface) -> PixelSyncApp:
    return build_app(surface=surface)


def _run_and_report(work: Awaitable[list[RefreshOutcome]]) -> list[RefreshOutcome]:
    async def runner() -> list[RefreshOutcome]:
        return await work

    outcomes = asyncio.run(runner())
    counts = Counter(str(outcome) for outcome in outcomes)
    log.info(
        "Reconciliation finished: %s",
        ", ".join(f"{name}={count}" for name, count in sorted(counts.items())) or "nothing to do",
    )
    return outcomes
