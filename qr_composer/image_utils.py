"""Image processing utilities for QR composition."""

import base64
import io
import re
from enum import Enum

from PIL import Image, ImageOps, UnidentifiedImageError

from qr_composer.errors import LogoDecodeError

TRANSPARENT = (255, 255, 255, 0)


class VerifyResult(Enum):
    """Result of QR scannability verification."""
    SCANNABLE = "scannable"
    NOT_SCANNABLE = "not_scannable"
    SKIPPED = "skipped"  # pyzbar not installed


_SVG_HEAD = re.compile(
    rb"^(?:\xef\xbb\xbf)?\s*"  # BOM, leading whitespace
    rb"(?:<\?xml[^>]*>\s*)?(?:<!--.*?-->\s*)*(?:<!DOCTYPE[^>]*>\s*)?"
    rb"<svg[\s>]",
    re.DOTALL,
)


def is_svg(data: bytes) -> bool:
    return bool(_SVG_HEAD.match(data[:4096]))


def rasterize_svg(data: bytes, size: int, label: str = "logo") -> bytes:
    """Render SVG bytes to PNG bytes ``size`` px wide, keeping the aspect ratio.

    cairosvg loads the native cairo library on import.
    """
    try:
        import cairosvg
    except (ImportError, OSError) as e:
        raise LogoDecodeError(
            f"Cannot rasterize SVG {label}: cairosvg or the cairo library is unavailable ({e})"
        ) from e

    try:
        return cairosvg.svg2png(bytestring=data, output_width=size)
    except (ValueError, SyntaxError, OSError) as e:
        raise LogoDecodeError(f"Could not rasterize SVG {label}: {e}") from e


def decode_image(data: bytes, label: str = "logo", svg_size: int | None = None) -> Image.Image:
    """Decode encoded image bytes into an RGBA image.

    SVG input is rasterized first, ``svg_size`` px wide when given.

    Raises:
        LogoDecodeError: If the bytes are not a format Pillow can read, or
            the image is large enough to trip Pillow's decompression-bomb guard.
    """
    if is_svg(data):
        data = rasterize_svg(data, svg_size or 512, label)
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise LogoDecodeError(f"Could not decode {label} image: {e}") from e
    return img.convert("RGBA")


def contain_fit(img: Image.Image, size: int) -> Image.Image:
    """Scale ``img`` into a transparent ``size`` x ``size`` box.

    Aspect ratio is preserved; the leftover space is padded, never cropped.
    """
    return ImageOps.pad(
        img.convert("RGBA"),
        (size, size),
        method=Image.LANCZOS,
        color=TRANSPARENT,
        centering=(0.5, 0.5),
    )


def matte(img: Image.Image, margin: int, color: tuple[int, int, int, int]) -> Image.Image:
    """Put ``img`` on an opaque square of ``color`` with ``margin`` px on each side."""
    side = img.width + 2 * margin
    canvas = Image.new("RGBA", (side, side), color[:3] + (255,))
    canvas.alpha_composite(img, (margin, margin))
    return canvas


def center_offset(outer: int, inner: int) -> int:
    """Top-left coordinate that centres ``inner`` inside ``outer``, floored."""
    return (outer - inner) // 2


def overlay_center(base: Image.Image, overlay: Image.Image) -> tuple[int, int]:
    """Alpha-composite ``overlay`` onto the middle of ``base`` in place.

    Returns:
        The (x, y) position the overlay was placed at.
    """
    x = center_offset(base.width, overlay.width)
    y = center_offset(base.height, overlay.height)
    base.alpha_composite(overlay.convert("RGBA"), (x, y))
    return x, y


def to_png_bytes(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def to_data_url(png: bytes) -> str:
    """Wrap PNG bytes as a ``data:image/png;base64,...`` URL."""
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def verify_qr_scannable(png: bytes) -> tuple[VerifyResult, str | None]:
    """Attempt to decode a QR code from PNG bytes.

    Uses pyzbar if available, otherwise returns SKIPPED.

    Args:
        png: The encoded image to verify.

    Returns:
        Tuple of (VerifyResult, decoded_data: str | None).
    """
    try:
        from pyzbar.pyzbar import decode as pyzbar_decode
    except ImportError:
        return VerifyResult.SKIPPED, None

    img = Image.open(io.BytesIO(png)).convert("RGB")
    results = pyzbar_decode(img)
    if results:
        decoded = results[0].data.decode("utf-8")
        return VerifyResult.SCANNABLE, decoded
    return VerifyResult.NOT_SCANNABLE, None
