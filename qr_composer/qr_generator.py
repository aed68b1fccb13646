"""Generate the base QR raster that centre content is composited onto."""

import logging

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

from qr_composer.errors import EncodingError, InvalidOptionsError
from qr_composer.options import RenderOptions, parse_color

log = logging.getLogger(__name__)

_ERROR_CORRECTION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


def build_matrix(data: str, error_correction: str = "M", margin: int = 2) -> list[list[bool]]:
    """Encode ``data`` and return the module matrix including the quiet zone.

    Raises:
        EncodingError: If the payload does not fit any QR version at this level.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=_ERROR_CORRECTION[error_correction],
        box_size=1,
        border=margin,
    )
    qr.add_data(data)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        raise EncodingError(
            f"Cannot encode {len(data)} characters at error correction level {error_correction}: {e}"
        ) from e

    log.debug("Encoded %d chars as version %d-%s", len(data), qr.version, error_correction)
    return qr.get_matrix()


def generate_qr_code(data: str, options: RenderOptions | None = None) -> Image.Image:
    """Generate a ``width`` x ``width`` RGBA QR code in the requested palette.

    Each module is painted at 1px and the symbol is then scaled with
    nearest-neighbour so module edges stay sharp at any output width.

    Args:
        data: The URL or text to encode. Not validated as a URL.
        options: Size, quiet zone, colours and error-correction level.

    Returns:
        PIL Image in RGBA mode.

    Raises:
        InvalidOptionsError: If ``data`` is empty or an option is malformed.
        EncodingError: If the payload is too long, or ``width`` is smaller
            than the symbol plus quiet zone at one pixel per module.
    """
    options = options or RenderOptions()
    options.validate()

    if not isinstance(data, str) or not data:
        raise InvalidOptionsError("QR data cannot be empty.")

    matrix = build_matrix(data, options.error_correction, options.margin)
    modules = len(matrix)
    if options.width < modules:
        raise EncodingError(
            f"width {options.width}px is too small for a {modules}x{modules} module symbol "
            f"(including margin); use at least {modules}px"
        )

    dark = parse_color(options.dark_color, "dark_color")
    light = parse_color(options.light_color, "light_color")

    qr_image = Image.new("RGBA", (modules, modules), light)
    qr_image.putdata([dark if cell else light for row in matrix for cell in row])
    return qr_image.resize((options.width, options.width), Image.NEAREST)
