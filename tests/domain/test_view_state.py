from __future__ import annotations

import pytest

from pixelsync.domain.model import Pixel, PixelCanvas, Sovereignty, Territory
from pixelsync.domain.view_state import derive


def _canvas(count: int, *, filled_pixels: int | None = None) -> PixelCanvas:
    return PixelCanvas.from_pixels(
        "t",
        (Pixel(x=i % 64, y=i // 64, color="#112233") for i in range(count)),
        filled_pixels=filled_pixels,
    )


@pytest.mark.parametrize("count", [0, 1, 17, 4096])
@pytest.mark.parametrize("owner", [None, "alice"])
@pytest.mark.parametrize("sovereignty", list(Sovereignty))
def test_has_content_depends_only_on_pixels(
    count: int, owner: str | None, sovereignty: Sovereignty
) -> None:
    territory = Territory(id="t", owner_ref=owner, sovereignty=sovereignty)

    state = derive(territory, _canvas(count))

    assert state.has_content == (count > 0)
    assert state.sovereignty is sovereignty


def test_unowned_territory_never_renders() -> None:
    state = derive(Territory(id="t", owner_ref=None), _canvas(10))

    assert state.has_content
    assert not state.should_render


def test_owned_territory_with_content_renders() -> None:
    state = derive(Territory(id="t", owner_ref="alice"), _canvas(1))

    assert state.should_render


def test_missing_inputs_default_to_nothing() -> None:
    state = derive(None, None)

    assert not state.has_content
    assert not state.should_render
    assert state.fill_ratio == 0
    assert state.sovereignty is Sovereignty.UNCONQUERED


def test_fill_ratio_prefers_trusted_count_and_is_capped() -> None:
    territory = Territory(id="t", owner_ref="alice")

    assert derive(territory, _canvas(1024)).fill_ratio == pytest.approx(0.25)
    assert derive(territory, _canvas(2, filled_pixels=2048)).fill_ratio == pytest.approx(0.5)
    assert derive(territory, _canvas(2, filled_pixels=10_000)).fill_ratio == 1.0


def test_fill_ratio_is_zero_without_content_even_with_trusted_count() -> None:
    state = derive(Territory(id="t", owner_ref="alice"), _canvas(0, filled_pixels=50))

    assert state.fill_ratio == 0
    assert state.filled_count == 0


def test_feature_flags_and_preserve_copy() -> None:
    state = derive(Territory(id="t", owner_ref="alice", sovereignty=Sovereignty.RULED), None)

    assert state.to_feature_flags() == {
        "has_content": False,
        "fill_ratio": 0.0,
        "sovereignty": "ruled",
        "filled_count": 0,
    }
    assert state.preserving_content().has_content
    assert not state.has_content
