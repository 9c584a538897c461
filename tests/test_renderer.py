import numpy as np
import pytest

from qrpaint.errors import RenderError
from qrpaint.raster import get_qr_element_size, to_rgba
from qrpaint.renderer import get_module_matrix, render_qr


def test_module_matrix_is_square_version_one():
    matrix = get_module_matrix("HELLO", "Q")
    assert len(matrix) == 21
    assert all(len(row) == 21 for row in matrix)
    # top-left finder corner
    assert matrix[0][0] and not matrix[1][1] and matrix[2][2]


def test_render_is_black_and_white_of_requested_size():
    bitmap = render_qr("HELLO", "Q", 1024)
    assert bitmap.shape == (1024, 1024)
    assert bitmap.dtype == np.uint8
    assert set(np.unique(bitmap)) == {0, 255}


def test_render_keeps_a_white_quiet_zone():
    bitmap = render_qr("HELLO", "Q", 1024)
    # 21 modules -> 44px points, 50px margin
    assert np.all(bitmap[:50, :] == 255)
    assert np.all(bitmap[:, :50] == 255)
    assert bitmap[50, 50] == 0


def test_element_size_of_rendered_code():
    bitmap = render_qr("HELLO", "Q", 1024)
    assert get_qr_element_size(to_rgba(bitmap)) == 1024 // 23


def test_render_rejects_tiny_images():
    with pytest.raises(RenderError, match="too small"):
        render_qr("HELLO", "Q", 20)


@pytest.mark.parametrize("image_size", [0, -1, -5, -1024])
def test_render_rejects_non_positive_sizes(image_size):
    with pytest.raises(RenderError, match="positive"):
        render_qr("HELLO", "Q", image_size)


def test_render_rejects_overlong_input():
    with pytest.raises(RenderError):
        render_qr("x" * 5000, "Q", 1024)


def test_unknown_ecc_level():
    with pytest.raises(RenderError):
        get_module_matrix("HELLO", "Z")
