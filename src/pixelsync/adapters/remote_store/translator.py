"""Translate store payloads into canonical domain records and back."""

from __future__ import annotations

from pixelsync.domain.model import (
    FromRemoteStore,
    GeoBounds,
    Pixel,
    PixelCanvas,
    SurfaceMapping,
    Territory,
    build_territory,
)

from .schema import BoundsPayload, CanvasPayload, PixelPayload, TerritoryPayload


def territory_from_payload(payload: TerritoryPayload) -> Territory:
    mapping = None
    if payload.surface_id and payload.feature_id not in (None, ""):
        mapping = SurfaceMapping(surface_id=payload.surface_id, feature_id=str(payload.feature_id))
    return build_territory(
        territory_id=payload.id,
        owner_ref=payload.owner,
        sovereignty=payload.sovereignty,
        surface_mapping=mapping,
        geometry=payload.geometry,
        name=payload.name,
        provenance=FromRemoteStore(revision=payload.revision),
    )


def territory_to_payload(territory: Territory) -> TerritoryPayload:
    mapping = territory.surface_mapping
    return TerritoryPayload(
        id=territory.id,
        name=territory.name,
        owner=territory.owner_ref,
        sovereignty=str(territory.sovereignty),
        geometry=dict(territory.geometry) if territory.geometry else None,
        surfaceId=mapping.surface_id if mapping else None,
        featureId=mapping.feature_id if mapping else None,
    )


def canvas_from_payload(payload: CanvasPayload, *, grid_size: int) -> PixelCanvas:
    bounds = None
    if payload.bounds is not None:
        bounds = GeoBounds(
            west=payload.bounds.west,
            south=payload.bounds.south,
            east=payload.bounds.east,
            north=payload.bounds.north,
        )
    return PixelCanvas.from_pixels(
        payload.territory_id,
        (
            Pixel(
                x=pixel.x,
                y=pixel.y,
                color=pixel.color,
                last_editor=pixel.last_editor,
                last_edited_at=pixel.last_edited_at,
            )
            for pixel in payload.pixels
        ),
        filled_pixels=payload.filled_pixels,
        bounds=bounds,
        width=payload.width or grid_size,
        height=payload.height or grid_size,
    )


def canvas_to_payload(canvas: PixelCanvas) -> CanvasPayload:
    bounds = canvas.bounds
    return CanvasPayload(
        territoryId=canvas.territory_id,
        pixels=[
            PixelPayload(
                x=pixel.x,
                y=pixel.y,
                color=pixel.color,
                lastEditor=pixel.last_editor,
                lastEditedAt=pixel.last_edited_at,
            )
            for pixel in canvas.pixels
        ],
        filledPixels=canvas.filled_pixels,
        bounds=(
            BoundsPayload(
                west=bounds.west, south=bounds.south, east=bounds.east, north=bounds.north
            )
            if bounds
            else None
        ),
        width=canvas.width,
        height=canvas.height,
    )
