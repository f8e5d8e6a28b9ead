from __future__ import annotations

from pixelsync.domain.model import GeoBounds, PixelCanvas, Territory
from pixelsync.domain.reconciliation import rasterize, render_image, resolve_bounds
from tests.helpers.engine import make_canvas, square


def test_single_pixel_paints_one_opaque_cell_at_top_left() -> None:
    canvas = make_canvas("t", [(0, 0, "#ff0000")], grid_size=16)

    image = render_image(canvas, cell_scale=8)

    assert image.size == (128, 128)
    assert image.mode == "RGBA"
    for x in range(8):
        for y in range(8):
            assert image.getpixel((x, y)) == (255, 0, 0, 255)
    assert image.getpixel((8, 0))[3] == 0
    assert image.getpixel((0, 8))[3] == 0
    assert image.getpixel((127, 127))[3] == 0
    alpha = image.getchannel("A")
    assert alpha.getbbox() == (0, 0, 8, 8)


def test_out_of_grid_and_unreadable_pixels_are_skipped() -> None:
    canvas = make_canvas("t", [(20, 0, "#ff0000"), (1, 1, "not-a-color")], grid_size=16)

    image = render_image(canvas, cell_scale=4)

    assert image.getchannel("A").getbbox() is None


def test_rasterize_returns_png_bytes() -> None:
    png = rasterize(make_canvas("t"), cell_scale=2)

    assert png.startswith(b"\x89PNG\r\n\x1a\n")


def test_resolve_bounds_prefers_canvas_bounds() -> None:
    territory = Territory(id="t", geometry=square(10, 20, 2))
    explicit = GeoBounds(west=0, south=0, east=1, north=1)
    canvas = make_canvas("t")

    assert resolve_bounds(territory, canvas) == GeoBounds(west=10, south=20, east=12, north=22)
    assert resolve_bounds(territory, PixelCanvas(territory_id="t", bounds=explicit)) == explicit
    assert resolve_bounds(Territory(id="t"), canvas) is None
