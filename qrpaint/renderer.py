"""QR renderer: encode text with the qrcode library and rasterize it into a fixed-size bitmap."""

from enum import Enum

import numpy as np
import qrcode
import qrcode.constants
from qrcode.exceptions import DataOverflowError

from qrpaint.errors import RenderError
from qrpaint.logging import audit, get_logger, trace

log = get_logger("renderer")

# Modules of quiet zone kept on each side of the symbol
MARGIN_MODULES = 1


class ECCLevel(Enum):
    L = qrcode.constants.ERROR_CORRECT_L  # 7%
    M = qrcode.constants.ERROR_CORRECT_M  # 15%
    Q = qrcode.constants.ERROR_CORRECT_Q  # 25%
    H = qrcode.constants.ERROR_CORRECT_H  # 30%


ECC_NAMES = {"L": ECCLevel.L, "M": ECCLevel.M, "Q": ECCLevel.Q, "H": ECCLevel.H}


@trace
def get_module_matrix(text: str, ecc: str = "Q") -> list[list[bool]]:
    """Raw module matrix (True = black) at the smallest version that fits."""
    try:
        ecc_level = ECC_NAMES[ecc.upper()]
    except KeyError:
        raise RenderError(f"Unknown error correction level: {ecc!r}") from None

    qr = qrcode.QRCode(
        version=None,
        error_correction=ecc_level.value,
        box_size=1,
        border=0,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        raise RenderError(f"Input does not fit in a QR code at level {ecc.upper()}: {exc}") from exc
    return qr.modules


@trace
def render_qr(text: str, ecc: str = "Q", image_size: int = 1024) -> np.ndarray:
    """Render *text* as a square grayscale bitmap of *image_size* pixels.

    Modules are drawn as ``point x point`` squares where ``point`` is the
    largest integer size that leaves one module of white margin on each
    side. The symbol is centered; leftover pixels stay white.

    Returns:
        uint8 array of shape ``(image_size, image_size)``, 0 = black, 255 = white.

    Raises:
        RenderError: data too long for the level, or image too small.
    """
    if image_size < 1:
        raise RenderError(f"Image size must be a positive number of pixels, got {image_size}")

    modules = np.array(get_module_matrix(text, ecc), dtype=bool)
    n = modules.shape[0]

    point = image_size // (n + 2 * MARGIN_MODULES)
    if point <= 0:
        raise RenderError(
            f"Image size {image_size}px is too small for a {n}x{n} QR code"
        )
    margin = (image_size - point * n) // 2

    bitmap = np.full((image_size, image_size), 255, dtype=np.uint8)
    scaled = np.kron(modules, np.ones((point, point), dtype=bool))
    region = bitmap[margin:margin + point * n, margin:margin + point * n]
    region[scaled] = 0

    audit("qr.rendered", logger=log,
          text=text[:80], ecc=ecc.upper(), modules=f"{n}x{n}",
          point_px=point, margin_px=margin, image_px=f"{image_size}x{image_size}")
    return bitmap
