"""Derived view state for a territory.

``derive`` is the only place that decides whether a territory shows art. Every
consumer (flag publication, overlay rendering, progressive loading) goes
through it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from pixelsync.domain.model import Sovereignty

if TYPE_CHECKING:
    from pixelsync.domain.model import PixelCanvas, Territory


@dataclass(slots=True, frozen=True, kw_only=True)
class TerritoryViewState:
    has_content: bool
    fill_ratio: float
    filled_count: int
    sovereignty: Sovereignty
    should_render: bool

    def to_feature_flags(self) -> dict[str, object]:
        return {
            "has_content": self.has_content,
            "fill_ratio": self.fill_ratio,
            "sovereignty": str(self.sovereignty),
            "filled_count": self.filled_count,
        }

    def preserving_content(self) -> TerritoryViewState:
        """Copy that keeps an earlier "has content" signal for this pass."""

        return replace(self, has_content=True)


def derive(territory: Territory | None, canvas: PixelCanvas | None) -> TerritoryViewState:
    has_content = canvas is not None and canvas.has_pixels
    sovereignty = territory.sovereignty if territory is not None else Sovereignty.UNCONQUERED
    owner_ref = territory.owner_ref if territory is not None else None

    fill_ratio = 0.0
    filled_count = 0
    if canvas is not None and has_content:
        filled_count = canvas.filled_count
        area = canvas.width * canvas.height
        fill_ratio = min(1.0, filled_count / area) if area > 0 else 1.0

    return TerritoryViewState(
        has_content=has_content,
        fill_ratio=fill_ratio,
        filled_count=filled_count,
        sovereignty=sovereignty,
        should_render=has_content and owner_ref is not None,
    )
