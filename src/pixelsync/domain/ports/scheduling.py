"""Timer port used for every delay in reconciliation."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Scheduler(Protocol):
    def now(self) -> float:
        """Monotonic seconds, used for cache freshness."""
        ...

    async def sleep(self, delay: float) -> None:
        """Suspend for ``delay`` seconds before continuing foreground work."""
        ...

    async def idle(self, delay: float) -> None:
        """Yield to the host until it is idle, waiting at most ``delay`` seconds."""
        ...


__all__ = ["Scheduler"]
