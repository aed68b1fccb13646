"""Compose QR codes with optional logo or monogram centre content.

Typical use from a request handler::

    png = render_qr(
        "https://example.com/invitation/abc123",
        RenderOptions(width=300, margin=2),
        "monogram",
        {"monogram": "M&E"},
    )

Whether a failed centre element should degrade to a plain code is up to the
caller; :func:`render_qr` always raises.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from PIL import Image

from qr_composer import MAX_BATCH_SIZE
from qr_composer.errors import InvalidOptionsError, QRComposerError
from qr_composer.image_utils import contain_fit, decode_image, matte, overlay_center, to_png_bytes
from qr_composer.logo_source import load_logo_bytes
from qr_composer.monogram import render_badge
from qr_composer.options import (
    LogoCenter,
    MonogramCenter,
    NoCenter,
    RenderOptions,
    build_center,
    parse_color,
)
from qr_composer.qr_generator import generate_qr_code

log = logging.getLogger(__name__)

LogoLoader = Callable[[str], bytes]


def render_qr(
    url: str,
    options: RenderOptions | None = None,
    center_type: str = "none",
    center_options: Any = None,
    *,
    logo_loader: LogoLoader | None = None,
) -> bytes:
    """Render ``url`` as a PNG QR code, optionally with centre content.

    Args:
        url: Payload to encode. Any non-empty text; malformed URLs are
            encoded literally.
        options: Base code rendering options. Defaults to ``RenderOptions()``.
        center_type: ``"none"``, ``"logo"`` or ``"monogram"``.
        center_options: A matching centre spec, or a mapping of its fields.
        logo_loader: Callable returning the bytes of a logo source. Defaults
            to reading local paths and fetching http(s) URLs.

    Returns:
        PNG bytes of a ``width`` x ``width`` image.

    Raises:
        InvalidOptionsError: Malformed options.
        EncodingError: The payload does not fit a QR symbol at this size/level.
        LogoNotFoundError, LogoFetchError, LogoDecodeError: Logo unusable.
    """
    options = options or RenderOptions()
    options.validate()
    center = build_center(center_type, center_options)
    center.validate(options.width)

    base = generate_qr_code(url, options)

    if isinstance(center, LogoCenter):
        _overlay_logo(base, center, options.width, logo_loader or load_logo_bytes)
    elif isinstance(center, MonogramCenter):
        _overlay_monogram(base, center, options.width)

    log.debug("Rendered %dpx %s QR code for %s", options.width, center.center_type, url)
    return to_png_bytes(base)


def _overlay_logo(base: Image.Image, spec: LogoCenter, width: int, loader: LogoLoader) -> None:
    raw = loader(spec.image_source)
    size = spec.logo_size(width)
    logo = contain_fit(decode_image(raw, svg_size=size), size)
    canvas = matte(logo, spec.logo_margin(width), parse_color(spec.background_color, "background_color"))
    x, y = overlay_center(base, canvas)
    log.debug("Placed %dpx logo canvas at (%d, %d)", canvas.width, x, y)


def _overlay_monogram(base: Image.Image, spec: MonogramCenter, width: int) -> None:
    badge = render_badge(spec, width)
    x, y = overlay_center(base, badge)
    log.debug("Placed %dpx monogram %r at (%d, %d)", badge.width, spec.text, x, y)


# ---------------------------------------------------------------------------
# Batch rendering
# ---------------------------------------------------------------------------

@dataclass
class BatchItem:
    """Outcome of one URL in a batch."""

    url: str
    png: bytes | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.png is not None


def render_batch(urls: Iterable[str], options: RenderOptions | None = None) -> list[BatchItem]:
    """Render plain codes for up to ``MAX_BATCH_SIZE`` URLs.

    A URL that cannot be encoded is reported in its item's ``error`` and the
    rest of the batch still renders.

    Raises:
        InvalidOptionsError: If ``urls`` is empty, too long, or ``options``
            are malformed. Nothing is rendered in that case.
    """
    urls = list(urls)
    if not urls:
        raise InvalidOptionsError("URLs list is required")
    if len(urls) > MAX_BATCH_SIZE:
        raise InvalidOptionsError(f"Maximum {MAX_BATCH_SIZE} URLs allowed per batch, got {len(urls)}")

    options = options or RenderOptions()
    options.validate()

    items = []
    for url in urls:
        try:
            items.append(BatchItem(url=url, png=render_qr(url, options, "none", NoCenter())))
        except QRComposerError as e:
            log.warning("Batch item failed for %r: %s", url, e)
            items.append(BatchItem(url=url, error=str(e)))

    log.info("Generated %d of %d QR codes", sum(item.success for item in items), len(items))
    return items
