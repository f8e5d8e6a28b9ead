"""Territory reconciliation: keep the map in step with the territory store.

Flow for one territory:
1) dedup against reconciliations already in flight
2) load the canonical record (store, then registry, then surface scan)
3) drop cached canvases on forced refresh or ownership change
4) read the canvas through the cache tiers
5) derive the view state and publish it as feature flags
6) show or hide the raster overlay
"""

from __future__ import annotations

from .cache_tiers import CacheTiers
from .events import TerritoryEvents
from .identifiers import FeatureMatch, IdentifierResolver, MatchKind, slugify
from .overlay import OverlayLifecycleManager, OverlayResourceIds
from .pipeline import ReconciliationPipeline, RefreshOptions, RefreshOutcome
from .progressive import ProgressiveLoader
from .raster import rasterize, render_image, resolve_bounds
from .registry import TerritoryRegistry

__all__ = [
    "CacheTiers",
    "FeatureMatch",
    "IdentifierResolver",
    "MatchKind",
    "OverlayLifecycleManager",
    "OverlayResourceIds",
    "ProgressiveLoader",
    "ReconciliationPipeline",
    "RefreshOptions",
    "RefreshOutcome",
    "TerritoryEvents",
    "TerritoryRegistry",
    "rasterize",
    "render_image",
    "resolve_bounds",
    "slugify",
]
