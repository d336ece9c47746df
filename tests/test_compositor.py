"""Placement policy and alpha blending."""

import numpy as np
import pytest

from image_stamper.core.compositor import (
    FitPolicy,
    blend,
    compute_placement,
    compute_scale,
    resize_stamp,
)
from image_stamper.core.raster import PixelBuffer


def solid(w, h, rgba):
    arr = np.zeros((h, w, 4), dtype=np.uint8)
    arr[:, :] = rgba
    return PixelBuffer.from_array(arr)


SIZES = [
    (200, 200, 100, 50),
    (640, 480, 37, 91),
    (1, 1, 300, 300),
    (1920, 1080, 1000, 1000),
    (333, 777, 10, 3),
]


@pytest.mark.parametrize("cw,ch,sw,sh", SIZES)
def test_cover_scale_covers_canvas(cw, ch, sw, sh):
    scale = compute_scale(cw, ch, sw, sh, FitPolicy.cover())
    assert float(scale) * sw >= cw - 1e-3
    assert float(scale) * sh >= ch - 1e-3


def test_cover_placement_overflows_with_negative_offset():
    # 100x50 stamp on 200x200: scale 4 -> 400x200, centred horizontally
    p = compute_placement(200, 200, 100, 50, FitPolicy.cover())
    assert (p.scaled_w, p.scaled_h) == (400, 200)
    assert (p.offset_x, p.offset_y) == (-100, 0)


def test_cover_truncates_scaled_dimensions():
    # scale = max(10/3, 10/7) = 3.333..; 3 * 3.333.. = 9.99.. or 10, 7 * 3.33 = 23.3 -> 23
    p = compute_placement(10, 10, 3, 7, FitPolicy.cover())
    assert p.scaled_h == 23
    assert p.scaled_w in (9, 10)
    assert p.offset_y == -6


@pytest.mark.parametrize("cw,ch,sw,sh", SIZES[:2] + SIZES[3:])
@pytest.mark.parametrize("padding", [0, 5, 20])
def test_contain_stays_inside_padding(cw, ch, sw, sh, padding):
    p = compute_placement(cw, ch, sw, sh, FitPolicy.contain(padding))
    assert p.scaled_w <= cw - 2 * padding
    assert p.scaled_h <= ch - 2 * padding
    assert p.offset_x >= 0 and p.offset_y >= 0


def test_contain_with_padding_larger_than_canvas_scales_to_nothing():
    p = compute_placement(30, 30, 10, 10, FitPolicy.contain(20))
    assert (p.scaled_w, p.scaled_h) == (0, 0)
    assert resize_stamp(solid(10, 10, (1, 2, 3, 255)), p.scaled_w, p.scaled_h).is_empty()


def test_fit_policy_rejects_unknown_mode():
    with pytest.raises(ValueError):
        FitPolicy("stretch")
    with pytest.raises(ValueError):
        FitPolicy.contain(-1)


def test_resize_supports_up_and_down_scaling():
    stamp = solid(10, 20, (0, 255, 0, 255))
    assert resize_stamp(stamp, 40, 80).size == (40, 80)
    assert resize_stamp(stamp, 3, 6).size == (3, 6)


def test_blend_zero_opacity_keeps_base_identical():
    base_arr = np.random.default_rng(1).integers(0, 256, (16, 16, 4), dtype=np.uint8)
    base = PixelBuffer.from_array(base_arr)
    overlay = PixelBuffer.from_array(
        np.random.default_rng(2).integers(0, 256, (16, 16, 4), dtype=np.uint8)
    )
    out = blend(base, overlay, 0, 0, 0.0)
    assert out.pixels == base.pixels


def test_blend_full_opacity_opaque_pixel_replaces_rgb_keeps_alpha():
    base = solid(4, 4, (10, 20, 30, 77))
    overlay = solid(2, 2, (200, 100, 50, 255))
    out = blend(base, overlay, 1, 1, 1.0).as_array()
    assert out[1, 1].tolist() == [200, 100, 50, 77]
    assert out[2, 2].tolist() == [200, 100, 50, 77]
    assert out[0, 0].tolist() == [10, 20, 30, 77]
    assert (out[:, :, 3] == 77).all()


def test_blend_half_opacity_truncates():
    base = solid(1, 1, (255, 255, 255, 255))
    overlay = solid(1, 1, (255, 0, 0, 255))
    out = blend(base, overlay, 0, 0, 0.5).as_array()
    # 255 * 0.5 = 127.5 -> 127
    assert out[0, 0].tolist() == [255, 127, 127, 255]


def test_blend_clips_out_of_bounds_overlay():
    base = solid(5, 5, (0, 0, 0, 255))
    overlay = solid(4, 4, (255, 255, 255, 255))
    out = blend(base, overlay, -2, 3, 1.0).as_array()
    white = (out[:, :, 0] == 255)
    assert white.sum() == 2 * 2
    assert white[3:5, 0:2].all()


def test_blend_fully_outside_returns_base():
    base = solid(5, 5, (9, 9, 9, 255))
    overlay = solid(3, 3, (255, 255, 255, 255))
    assert blend(base, overlay, 10, 10, 1.0) is base
    assert blend(base, overlay, -3, 0, 1.0) is base


def test_blend_clamps_opacity():
    base = solid(2, 2, (0, 0, 0, 255))
    overlay = solid(2, 2, (100, 100, 100, 255))
    assert blend(base, overlay, 0, 0, 1.5).pixels == blend(base, overlay, 0, 0, 1.0).pixels
    assert blend(base, overlay, 0, 0, -1.0).pixels == base.pixels
