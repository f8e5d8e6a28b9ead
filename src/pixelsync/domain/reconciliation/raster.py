"""Rasterize pixel canvases into transparent PNG overlays."""

from __future__ import annotations

from io import BytesIO
from logging import getLogger
from typing import TYPE_CHECKING

from PIL import Image, ImageColor, ImageDraw

from pixelsync.domain.model import GeoBounds

if TYPE_CHECKING:
    from pixelsync.domain.model import PixelCanvas, Territory

log = getLogger(__name__)


def render_image(canvas: PixelCanvas, *, cell_scale: int = 8) -> Image.Image:
    """Paint every in-grid pixel as an opaque ``cell_scale`` square."""

    image = Image.new("RGBA", (canvas.width * cell_scale, canvas.height * cell_scale), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    for pixel in canvas.pixels:
        if not (0 <= pixel.x < canvas.width and 0 <= pixel.y < canvas.height):
            continue
        try:
            red, green, blue = ImageColor.getrgb(pixel.color)[:3]
        except ValueError:
            log.debug("Skipping pixel with unreadable color %r", pixel.color)
            continue
        left = pixel.x * cell_scale
        top = pixel.y * cell_scale
        draw.rectangle(
            (left, top, left + cell_scale - 1, top + cell_scale - 1),
            fill=(red, green, blue, 255),
        )
    return image


def rasterize(canvas: PixelCanvas, *, cell_scale: int = 8) -> bytes:
    buffer = BytesIO()
    render_image(canvas, cell_scale=cell_scale).save(buffer, format="PNG")
    return buffer.getvalue()


def resolve_bounds(territory: Territory, canvas: PixelCanvas) -> GeoBounds | None:
    if canvas.bounds is not None:
        return canvas.bounds
    return GeoBounds.from_geometry(territory.geometry)
