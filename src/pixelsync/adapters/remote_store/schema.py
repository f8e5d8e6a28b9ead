"""Territory store payload schemas."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TerritoryPayload(StoreBaseModel):
    id: str
    name: str | None = None
    owner: str | None = None
    sovereignty: str | None = None
    revision: int | None = None
    geometry: dict[str, Any] | None = None
    surface_id: str | None = Field(default=None, alias="surfaceId")
    feature_id: str | int | None = Field(default=None, alias="featureId")


class TerritoryListPayload(StoreBaseModel):
    items: list[TerritoryPayload] = Field(default_factory=list)


class PixelPayload(StoreBaseModel):
    x: int
    y: int
    color: str
    last_editor: str | None = Field(default=None, alias="lastEditor")
    last_edited_at: datetime | None = Field(default=None, alias="lastEditedAt")


class BoundsPayload(StoreBaseModel):
    west: float
    south: float
    east: float
    north: float


class CanvasPayload(StoreBaseModel):
    territory_id: str = Field(alias="territoryId")
    pixels: list[PixelPayload] = Field(default_factory=list)
    filled_pixels: int | None = Field(default=None, alias="filledPixels")
    bounds: BoundsPayload | None = None
    width: int | None = None
    height: int | None = None


class CanvasIdsPayload(StoreBaseModel):
    territory_ids: list[str] = Field(default_factory=list, alias="territoryIds")
