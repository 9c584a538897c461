import io

import numpy as np
import pytest
from PIL import Image

from qrpaint.logo import LogoAssets


def make_module_raster(modules, module_px: int, margin_px: int) -> np.ndarray:
    """RGBA raster for a bool module grid: black modules on a white field."""
    modules = np.asarray(modules, dtype=bool)
    n = modules.shape[0]
    size = n * module_px + 2 * margin_px
    raster = np.full((size, size, 4), 255, dtype=np.uint8)
    scaled = np.kron(modules, np.ones((module_px, module_px), dtype=bool))
    body = raster[margin_px:margin_px + n * module_px, margin_px:margin_px + n * module_px]
    body[scaled] = (0, 0, 0, 255)
    return raster


def finder_grid(n: int = 21) -> np.ndarray:
    """Module grid holding only the top-left 7x7 finder pattern."""
    grid = np.zeros((n, n), dtype=bool)
    grid[0:7, 0:7] = True
    grid[1:6, 1:6] = False
    grid[2:5, 2:5] = True
    return grid


def png_bytes(image: Image.Image, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


def decode_png(data: bytes) -> np.ndarray:
    return np.asarray(Image.open(io.BytesIO(data)).convert("RGBA"))


@pytest.fixture
def red_logo() -> bytes:
    """Semi-transparent solid red logo, non-square source."""
    return png_bytes(Image.new("RGBA", (40, 30), (255, 0, 0, 128)))


@pytest.fixture
def solid_assets() -> LogoAssets:
    """Flat-color logo variants that are easy to find in the output."""
    return LogoAssets(
        transparent=png_bytes(Image.new("RGBA", (64, 64), (0, 128, 0, 0))),
        white=png_bytes(Image.new("RGBA", (64, 64), (0, 128, 0, 255))),
    )
