"""Gradient painter: recolor the black QR modules by distance from the image center."""

from dataclasses import dataclass

import numpy as np

from qrpaint.logging import audit, get_logger, trace
from qrpaint.raster import BLACK, image_size_of, pixel_mask

log = get_logger("gradient")

GRADIENT_START = (100, 0, 100, 255)  # purple-magenta, at the center
GRADIENT_END = (30, 5, 60, 255)      # dark indigo, towards the edges


@dataclass(frozen=True)
class Gradient:
    """Two-stop linear RGBA gradient over ``[0.0, 1.0]``.

    Positions outside the domain clamp to the nearest endpoint.
    """

    start: tuple[int, int, int, int] = GRADIENT_START
    end: tuple[int, int, int, int] = GRADIENT_END

    def at_many(self, t: np.ndarray) -> np.ndarray:
        """Colors for an array of positions, as an ``(..., 4)`` uint8 array."""
        t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)[..., np.newaxis]
        start = np.array(self.start, dtype=np.float64)
        end = np.array(self.end, dtype=np.float64)
        return np.floor(start + (end - start) * t + 0.5).astype(np.uint8)

    def at(self, t: float) -> tuple[int, int, int, int]:
        return tuple(int(c) for c in self.at_many(np.array(t)))


@trace
def add_gradient(raster: np.ndarray, gradient: Gradient | None = None) -> np.ndarray:
    """Recolor every pure black pixel with the gradient, in place.

    Position is the Manhattan distance to the center divided by the image
    size, so corners reach values above 1.0 and take the end color. Any
    pixel that is not exactly black is left untouched.
    """
    gradient = gradient or Gradient()
    image_size = image_size_of(raster)
    center = image_size // 2

    black = pixel_mask(raster, BLACK)
    ys, xs = np.nonzero(black)
    distance = np.abs(xs - center) + np.abs(ys - center)
    raster[ys, xs] = gradient.at_many(distance / image_size)

    audit("gradient.painted", logger=log, pixels=int(ys.size),
          start=gradient.start, end=gradient.end)
    return raster
