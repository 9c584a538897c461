"""Exception types raised by the qrpaint pipeline."""


class QrPaintError(Exception):
    """Base class for every failure that aborts a QR generation."""

    @property
    def message(self) -> str:
        return str(self)


class RenderError(QrPaintError):
    """The QR renderer rejected the text / size / error-correction combination."""


class LogoDecodeError(QrPaintError):
    """Logo bytes are not a recognized image format."""


class EncodeError(QrPaintError):
    """The final raster could not be serialized to PNG."""


class OptionsError(QrPaintError):
    """A request carried malformed generation options."""
