"""Territory store adapter."""

from __future__ import annotations

from .client import HttpTerritoryStore

__all__ = ["HttpTerritoryStore"]
