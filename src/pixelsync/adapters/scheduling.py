"""asyncio-backed scheduler."""

from __future__ import annotations

import asyncio
import time


class AsyncioScheduler:
    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, delay: float) -> None:
        await asyncio.sleep(max(0.0, delay))

    async def idle(self, delay: float) -> None:
        # No host idle signal outside a browser; a bounded pause stands in for it.
        await asyncio.sleep(max(0.0, delay))
