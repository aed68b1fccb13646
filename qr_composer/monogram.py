"""Render the monogram badge: bold text centred on a rounded rectangle."""

import logging
import os

from PIL import Image, ImageDraw, ImageFont

from qr_composer.options import MonogramCenter, parse_color

log = logging.getLogger(__name__)

# Bold font files to try per CSS-style family name. ImageFont.truetype
# searches the platform font directories for bare file names.
_BOLD_FONT_FILES = {
    "arial": ["arialbd.ttf", "Arial Bold.ttf", "LiberationSans-Bold.ttf"],
    "helvetica": ["Helvetica-Bold.ttf", "LiberationSans-Bold.ttf"],
    "times new roman": ["timesbd.ttf", "Times New Roman Bold.ttf", "LiberationSerif-Bold.ttf"],
    "georgia": ["georgiab.ttf", "Georgia Bold.ttf", "DejaVuSerif-Bold.ttf"],
    "courier new": ["courbd.ttf", "Courier New Bold.ttf", "LiberationMono-Bold.ttf"],
    "sans-serif": ["DejaVuSans-Bold.ttf", "LiberationSans-Bold.ttf", "arialbd.ttf"],
    "serif": ["DejaVuSerif-Bold.ttf", "LiberationSerif-Bold.ttf", "timesbd.ttf"],
    "monospace": ["DejaVuSansMono-Bold.ttf", "LiberationMono-Bold.ttf", "courbd.ttf"],
}


def _candidates(font_family: str) -> list[str]:
    names = []
    for family in font_family.split(","):
        family = family.strip().strip("'\"")
        if not family:
            continue
        if os.path.splitext(family)[1].lower() in (".ttf", ".otf", ".ttc"):
            names.append(family)
            continue
        names.extend(_BOLD_FONT_FILES.get(family.lower(), []))
        compact = family.replace(" ", "")
        names.extend([f"{compact}-Bold.ttf", f"{family} Bold.ttf", f"{compact}.ttf"])
    return names


def load_font(font_family: str, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a bold font for a comma-separated family list, like CSS ``font-family``.

    Falls back to Pillow's bundled default font at ``size`` when none of the
    families are installed.
    """
    for name in _candidates(font_family):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    log.debug("No installed font for %r, using Pillow's default font", font_family)
    return ImageFont.load_default(size=size)


def render_badge(spec: MonogramCenter, width: int) -> Image.Image:
    """Draw the monogram container for a code ``width`` px wide.

    The container is ``font_size + 2 * padding`` px square. Corners outside
    the rounded rectangle stay transparent. The text is drawn as glyphs, so
    characters such as ``&`` and ``<`` appear as typed.
    """
    side = spec.container_side(width)
    font_size = spec.font_size(width)

    badge = Image.new("RGBA", (side, side), (0, 0, 0, 0))
    draw = ImageDraw.Draw(badge)
    draw.rounded_rectangle(
        (0, 0, side - 1, side - 1),
        radius=spec.corner_radius,
        fill=parse_color(spec.background_color, "background_color"),
    )

    font = load_font(spec.font_family, font_size)
    left, top, right, bottom = draw.textbbox((0, 0), spec.text, font=font)
    x = (side - (right - left)) / 2 - left
    y = (side - (bottom - top)) / 2 - top
    draw.text((x, y), spec.text, font=font, fill=parse_color(spec.text_color, "text_color"))
    return badge
