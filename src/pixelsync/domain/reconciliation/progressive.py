"""Priority-tiered progressive loading.

The first ``immediate_count`` territories are reconciled by a small worker pool
and awaited. The rest are reconciled in the background in small chunks, each
scheduled for idle time, so a long off-screen tail never blocks the map.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from .pipeline import RefreshOptions, RefreshOutcome

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from pixelsync.config.rendering import PacingConfig
    from pixelsync.domain.ports import Scheduler

    from .pipeline import ReconciliationPipeline

log = getLogger(__name__)

PRESERVE_CONTENT = RefreshOptions(preserve_derived_flag=True)


class ProgressiveLoader:
    def __init__(
        self,
        *,
        pipeline: ReconciliationPipeline,
        scheduler: Scheduler,
        pacing: PacingConfig,
    ) -> None:
        self._pipeline = pipeline
        self._scheduler = scheduler
        self._pacing = pacing
        self._booted = False
        self._tail: asyncio.Task[list[RefreshOutcome]] | None = None

    @property
    def booted(self) -> bool:
        return self._booted

    async def boot(self, territory_ids: Iterable[str]) -> list[RefreshOutcome]:
        """Run the immediate head now and schedule the tail; only the first call counts."""

        if self._booted:
            log.debug("Progressive boot already ran, ignoring")
            return []
        self._booted = True

        candidates = list(dict.fromkeys(tid for tid in territory_ids if tid and tid.strip()))
        head = candidates[: self._pacing.immediate_count]
        tail = candidates[self._pacing.immediate_count :]
        log.info("Progressive boot: %s immediate, %s deferred", len(head), len(tail))

        outcomes = await self.load_batch(head, concurrency=self._pacing.immediate_concurrency)
        if tail:
            self._tail = asyncio.create_task(self._drain_tail(tail))
        return outcomes

    async def load_batch(
        self, territory_ids: Sequence[str], *, concurrency: int
    ) -> list[RefreshOutcome]:
        """Reconcile ``territory_ids`` with at most ``concurrency`` workers."""

        queue: asyncio.Queue[tuple[int, str]] = asyncio.Queue()
        for index, territory_id in enumerate(territory_ids):
            queue.put_nowait((index, territory_id))
        outcomes: list[RefreshOutcome] = [RefreshOutcome.SKIPPED] * len(territory_ids)

        async def worker() -> None:
            while True:
                try:
                    index, territory_id = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                outcomes[index] = await self._pipeline.refresh(territory_id, PRESERVE_CONTENT)

        workers = max(1, min(concurrency, len(territory_ids)))
        await asyncio.gather(*(worker() for _ in range(workers)))
        return outcomes

    async def wait_idle(self) -> list[RefreshOutcome]:
        """Wait for the deferred tail, if one was scheduled."""

        if self._tail is None:
            return []
        return await self._tail

    async def _drain_tail(self, territory_ids: list[str]) -> list[RefreshOutcome]:
        size = self._pacing.idle_chunk_size
        outcomes: list[RefreshOutcome] = []
        for start in range(0, len(territory_ids), size):
            await self._scheduler.idle(self._pacing.idle_delay)
            outcomes.extend(
                await self.load_batch(
                    territory_ids[start : start + size],
                    concurrency=self._pacing.idle_concurrency,
                )
            )
        log.info("Progressive tail finished: %s territories", len(territory_ids))
        return outcomes
