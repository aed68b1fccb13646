"""QR Composer: QR codes with logo or monogram centre content."""

__version__ = "1.0.0"

# Shared constants
DEFAULT_WIDTH = 300  # Invitation and album codes are rendered at 300px
DEFAULT_MARGIN = 2  # Quiet-zone width in modules
MAX_BATCH_SIZE = 50

from qr_composer.errors import (  # noqa: E402
    QRComposerError,
    InvalidOptionsError,
    EncodingError,
    LogoError,
    LogoNotFoundError,
    LogoFetchError,
    LogoDecodeError,
    LogoReadError,
)
from qr_composer.options import (  # noqa: E402
    RenderOptions,
    NoCenter,
    LogoCenter,
    MonogramCenter,
)
from qr_composer.composer import render_qr, render_batch, BatchItem  # noqa: E402
from qr_composer.image_utils import to_data_url  # noqa: E402

__all__ = [
    "__version__",
    "DEFAULT_WIDTH",
    "DEFAULT_MARGIN",
    "MAX_BATCH_SIZE",
    "QRComposerError",
    "InvalidOptionsError",
    "EncodingError",
    "LogoError",
    "LogoNotFoundError",
    "LogoFetchError",
    "LogoDecodeError",
    "LogoReadError",
    "RenderOptions",
    "NoCenter",
    "LogoCenter",
    "MonogramCenter",
    "render_qr",
    "render_batch",
    "BatchItem",
    "to_data_url",
]
