"""Logo handling: built-in logo assets, size bounds and centered compositing."""

import functools
import io
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw

from qrpaint.errors import LogoDecodeError
from qrpaint.logging import audit, get_logger, trace
from qrpaint.raster import image_size_of

log = get_logger("logo")

# Logo side may use at most 5/16 of the image side (well below the 25% ECC budget)
LOGO_BOUND_NUMERATOR = 5
LOGO_BOUND_DENOMINATOR = 16

# Colors of the built-in logo mark
MARK_COLOR = (100, 0, 100, 255)
MARK_ACCENT = (255, 255, 255, 255)


# ---------------------------------------------------------------------------
# Built-in logo assets
# ---------------------------------------------------------------------------

@trace
def create_logo_mark(size: int = 256, background: tuple[int, ...] = (255, 255, 255, 255)) -> Image.Image:
    """Draw the default logo: a rounded tile with a ring and a center dot.

    Rendered at 4x and downscaled with Lanczos for anti-aliased edges.
    Returns an RGBA image of *size* x *size* on *background*.
    """
    rs = size * 4
    s = rs / 100.0  # 100x100 design space

    img = Image.new("RGBA", (rs, rs), background)
    draw = ImageDraw.Draw(img)

    draw.rounded_rectangle([int(8 * s), int(8 * s), int(92 * s), int(92 * s)],
                           radius=int(20 * s), fill=MARK_COLOR)
    draw.ellipse([int(26 * s), int(26 * s), int(74 * s), int(74 * s)],
                 outline=MARK_ACCENT, width=int(8 * s))
    draw.ellipse([int(42 * s), int(42 * s), int(58 * s), int(58 * s)], fill=MARK_ACCENT)

    return img.resize((size, size), Image.LANCZOS)


def _png_bytes(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@dataclass(frozen=True)
class LogoAssets:
    """The two logo variants: one for transparent output, one for white."""

    transparent: bytes
    white: bytes

    def select(self, add_transparency: bool | None) -> bytes:
        return self.transparent if add_transparency is True else self.white

    @classmethod
    def from_files(cls, transparent_path: str | Path, white_path: str | Path) -> "LogoAssets":
        assets = cls(
            transparent=Path(transparent_path).read_bytes(),
            white=Path(white_path).read_bytes(),
        )
        audit("logo.assets_loaded", logger=log,
              transparent=str(transparent_path), white=str(white_path))
        return assets


@functools.lru_cache(maxsize=None)
def builtin_logo_assets() -> LogoAssets:
    """Built-in logo variants, rendered once per process."""
    assets = LogoAssets(
        transparent=_png_bytes(create_logo_mark(background=(255, 255, 255, 0))),
        white=_png_bytes(create_logo_mark(background=(255, 255, 255, 255))),
    )
    audit("logo.assets_built", logger=log,
          transparent_bytes=len(assets.transparent), white_bytes=len(assets.white))
    return assets


# ---------------------------------------------------------------------------
# Sizing & compositing
# ---------------------------------------------------------------------------

def logo_size_for(image_size: int, element_size: int) -> int:
    """Largest odd multiple of *element_size* within 5/16 of the image side.

    Grows two modules at a time so the logo stays centered on the module
    grid. Never smaller than one module.
    """
    bound = LOGO_BOUND_NUMERATOR * image_size // LOGO_BOUND_DENOMINATOR
    logo_size = element_size
    while logo_size + 2 * element_size <= bound:
        logo_size += 2 * element_size
    return logo_size


@trace
def decode_logo(logo: bytes) -> Image.Image:
    """Decode logo bytes of any format Pillow recognizes into RGBA."""
    try:
        image = Image.open(io.BytesIO(logo))
        image.load()
    except (OSError, SyntaxError, Image.DecompressionBombError) as exc:
        raise LogoDecodeError(f"Cannot decode logo image: {exc}") from exc
    return image.convert("RGBA")


@trace
def add_logo(raster: np.ndarray, logo: bytes, element_size: int) -> np.ndarray:
    """Resize *logo* to the bounded square and paste it over the raster center.

    The destination square is replaced outright, alpha channel included;
    the logo is not blended with the QR pixels underneath.
    """
    image_size = image_size_of(raster)
    logo_size = logo_size_for(image_size, element_size)

    resized = decode_logo(logo).resize((logo_size, logo_size), Image.LANCZOS)

    offset = (image_size - logo_size) // 2
    raster[offset:offset + logo_size, offset:offset + logo_size] = np.asarray(resized)

    audit("logo.composited", logger=log,
          image_px=image_size, element_px=element_size,
          logo_px=logo_size, offset_px=offset,
          area_pct=f"{100 * logo_size ** 2 / image_size ** 2:.1f}%")
    return raster
