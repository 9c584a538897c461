"""Raster helpers: RGBA conversion, transparency mapping and module-size estimation."""

import numpy as np

from qrpaint.logging import audit, get_logger, trace

log = get_logger("raster")

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
TRANSPARENT_WHITE = (255, 255, 255, 0)


def to_rgba(bitmap: np.ndarray) -> np.ndarray:
    """Expand a grayscale bitmap to an opaque RGBA raster."""
    rgba = np.empty(bitmap.shape + (4,), dtype=np.uint8)
    rgba[..., :3] = bitmap[..., np.newaxis]
    rgba[..., 3] = 255
    return rgba


def pixel_mask(raster: np.ndarray, color: tuple[int, ...]) -> np.ndarray:
    """Bool mask of pixels exactly equal to *color*."""
    return np.all(raster == np.array(color, dtype=np.uint8), axis=-1)


def image_size_of(raster: np.ndarray) -> int:
    return min(raster.shape[0], raster.shape[1])


@trace
def make_transparent(raster: np.ndarray) -> np.ndarray:
    """Replace every opaque white pixel with fully transparent white, in place."""
    white = pixel_mask(raster, WHITE)
    raster[white] = TRANSPARENT_WHITE
    audit("raster.transparent", logger=log, pixels=int(white.sum()))
    return raster


@trace
def get_qr_element_size(raster: np.ndarray) -> int:
    """Pixel width of one QR module, measured along the main diagonal.

    The quiet zone is white, so the first black pixel on the diagonal is the
    top-left corner of the top-left finder pattern; the run of black pixels
    from there is one module wide. This only holds for an unrotated code
    whose finder pattern sits on the diagonal. Falls back to 1 when no
    black pixel or no black-to-other transition is found.
    """
    size = image_size_of(raster)
    idx = np.arange(size)
    on_diagonal = pixel_mask(raster[idx, idx], BLACK)

    black_at = np.flatnonzero(on_diagonal)
    if black_at.size == 0:
        return 1
    start = int(black_at[0])

    ends = np.flatnonzero(~on_diagonal[start:])
    if ends.size == 0:
        return 1
    return int(ends[0])
