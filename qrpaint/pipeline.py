"""QR generation pipeline: render, then transparency -> logo -> gradient, then PNG.

The stage order is fixed. Each stage is gated by its own option and runs
independently of the others, always in the order of ``STAGES``.
"""

import base64
import io
import time
from dataclasses import asdict, dataclass
from typing import Callable

import numpy as np
from PIL import Image

from qrpaint.errors import EncodeError, OptionsError, QrPaintError
from qrpaint.gradient import add_gradient
from qrpaint.logging import audit, get_logger, trace
from qrpaint.logo import LogoAssets, add_logo, builtin_logo_assets
from qrpaint.raster import get_qr_element_size, make_transparent, to_rgba
from qrpaint.renderer import render_qr

log = get_logger("pipeline")

# Output side length in pixels
IMAGE_SIZE_IN_PIXELS = 1024
# Quartile: about 25% of the symbol may be damaged or covered
ECC_LEVEL = "Q"


@dataclass
class Options:
    add_logo: bool = False
    add_gradient: bool = False
    add_transparency: bool | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> "Options":
        """Build options from a JSON-like mapping; absent flags are disabled."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise OptionsError("options must be an object")

        unknown = set(data) - {"add_logo", "add_gradient", "add_transparency"}
        if unknown:
            raise OptionsError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        for name in ("add_logo", "add_gradient"):
            if not isinstance(data.get(name, False), bool):
                raise OptionsError(f"{name} must be a boolean")
        transparency = data.get("add_transparency")
        if transparency is not None and not isinstance(transparency, bool):
            raise OptionsError("add_transparency must be a boolean or null")

        return cls(
            add_logo=data.get("add_logo", False),
            add_gradient=data.get("add_gradient", False),
            add_transparency=transparency,
        )


@dataclass
class QrError:
    message: str


@dataclass
class QrResult:
    """Either PNG bytes or an error, never both."""

    image: bytes | None = None
    error: QrError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, image: bytes) -> "QrResult":
        return cls(image=image)

    @classmethod
    def failure(cls, message: str) -> "QrResult":
        return cls(error=QrError(message=message))

    def to_dict(self) -> dict:
        """JSON-safe form; the PNG travels base64-encoded."""
        if self.ok:
            return {"image": base64.b64encode(self.image).decode("ascii")}
        return {"error": asdict(self.error)}


@dataclass(frozen=True)
class Stage:
    name: str
    enabled: Callable[[Options], bool]
    apply: Callable[[np.ndarray, bytes], np.ndarray]


def _logo_stage(raster: np.ndarray, logo: bytes) -> np.ndarray:
    return add_logo(raster, logo, get_qr_element_size(raster))


STAGES = (
    Stage("transparency", lambda o: o.add_transparency is True, lambda r, _: make_transparent(r)),
    Stage("logo", lambda o: o.add_logo, _logo_stage),
    Stage("gradient", lambda o: o.add_gradient, lambda r, _: add_gradient(r)),
)


@trace
def encode_png(raster: np.ndarray) -> bytes:
    """Serialize an RGBA raster to PNG bytes."""
    buf = io.BytesIO()
    try:
        Image.fromarray(raster).save(buf, format="PNG")
    except (OSError, ValueError, TypeError) as exc:
        raise EncodeError(f"Cannot encode QR image as PNG: {exc}") from exc
    return buf.getvalue()


@trace
def generate(text: str, options: Options, logo: bytes, image_size: int = IMAGE_SIZE_IN_PIXELS) -> bytes:
    """Render *text* as a QR code, apply the enabled stages and return PNG bytes.

    Raises:
        RenderError, LogoDecodeError, EncodeError
    """
    raster = to_rgba(render_qr(text, ECC_LEVEL, image_size))

    applied = []
    for stage in STAGES:
        if stage.enabled(options):
            raster = stage.apply(raster, logo)
            applied.append(stage.name)

    png = encode_png(raster)
    audit("qr.generated", logger=log,
          text=text[:80], stages=",".join(applied) or "none",
          image_px=image_size, png_bytes=len(png))
    return png


def qrcode(
    text: str,
    options: Options,
    assets: LogoAssets | None = None,
    image_size: int = IMAGE_SIZE_IN_PIXELS,
) -> QrResult:
    """Generate a QR code and wrap the outcome in a :class:`QrResult`.

    The transparent logo variant is used only when ``add_transparency`` is
    exactly True; otherwise the white variant is used.
    """
    assets = assets or builtin_logo_assets()
    logo = assets.select(options.add_transparency)

    start = time.perf_counter()
    try:
        result = QrResult.success(generate(text, options, logo, image_size))
    except QrPaintError as exc:
        result = QrResult.failure(exc.message)
    elapsed = (time.perf_counter() - start) * 1000

    audit("qrcode.completed", logger=log,
          ok=result.ok, duration_ms=round(elapsed, 1),
          error=None if result.ok else result.error.message)
    return result
