import numpy as np
import pytest

from conftest import finder_grid, make_module_raster
from qrpaint.raster import (
    BLACK,
    TRANSPARENT_WHITE,
    WHITE,
    get_qr_element_size,
    make_transparent,
    pixel_mask,
    to_rgba,
)


def _mixed_raster() -> np.ndarray:
    rng = np.random.default_rng(7)
    raster = rng.integers(0, 256, size=(32, 32, 4), dtype=np.uint8)
    raster[::3, ::2] = WHITE
    raster[1::4, 1::3] = BLACK
    raster[2, 2] = (255, 255, 255, 254)
    raster[3, 3] = (255, 255, 254, 255)
    return raster


def test_to_rgba_is_opaque_gray():
    bitmap = np.array([[0, 255], [255, 0]], dtype=np.uint8)
    rgba = to_rgba(bitmap)
    assert rgba.shape == (2, 2, 4)
    assert tuple(rgba[0, 0]) == BLACK
    assert tuple(rgba[0, 1]) == WHITE


def test_make_transparent_only_touches_white():
    raster = _mixed_raster()
    before = raster.copy()
    was_white = pixel_mask(before, WHITE)

    result = make_transparent(raster)

    assert result is raster
    assert np.array_equal(pixel_mask(result, TRANSPARENT_WHITE), was_white | pixel_mask(before, TRANSPARENT_WHITE))
    assert np.array_equal(result[~was_white], before[~was_white])
    assert tuple(result[2, 2]) == (255, 255, 255, 254)
    assert tuple(result[3, 3]) == (255, 255, 254, 255)


def test_make_transparent_is_idempotent():
    once = make_transparent(_mixed_raster())
    twice = make_transparent(once.copy())
    assert np.array_equal(once, twice)


@pytest.mark.parametrize("module_px", [1, 2, 3, 7, 12, 44])
def test_element_size_matches_module_width(module_px):
    raster = make_module_raster(finder_grid(), module_px, margin_px=module_px + 5)
    assert get_qr_element_size(raster) == module_px


def test_element_size_without_quiet_zone():
    raster = make_module_raster(finder_grid(), 4, margin_px=0)
    assert get_qr_element_size(raster) == 4


def test_element_size_all_white_falls_back_to_one():
    raster = np.full((16, 16, 4), 255, dtype=np.uint8)
    assert get_qr_element_size(raster) == 1


def test_element_size_black_to_the_edge_falls_back_to_one():
    raster = np.full((16, 16, 4), 255, dtype=np.uint8)
    idx = np.arange(10, 16)
    raster[idx, idx] = BLACK
    assert get_qr_element_size(raster) == 1


def test_element_size_ignores_near_black():
    raster = make_module_raster(finder_grid(), 5, margin_px=5)
    raster[5, 5] = (0, 0, 0, 254)
    # first exact black pixel on the diagonal is now (6, 6)
    assert get_qr_element_size(raster) == 4
