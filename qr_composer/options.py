"""Render options and centre-content specs for QR composition."""

import math
import re
from dataclasses import dataclass, fields
from typing import Any, Mapping, Union

from PIL import ImageColor

from qr_composer import DEFAULT_MARGIN, DEFAULT_WIDTH
from qr_composer.errors import InvalidOptionsError


ERROR_CORRECTION_LEVELS = ("L", "M", "Q", "H")
CENTER_TYPES = ("none", "logo", "monogram")

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def parse_color(value: str, field_name: str = "color") -> tuple[int, int, int, int]:
    """Parse a hex colour (#RGB, #RGBA, #RRGGBB, #RRGGBBAA) into an RGBA tuple."""
    if not isinstance(value, str) or not _HEX_COLOR.match(value):
        raise InvalidOptionsError(f"{field_name} must be a hex colour like #RRGGBB, got {value!r}")
    rgba = ImageColor.getcolor(value, "RGBA")
    return rgba  # type: ignore[return-value]


def _check_fraction(value: float, field_name: str, allow_zero: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        raise InvalidOptionsError(f"{field_name} must be a number, got {value!r}")
    low_ok = value >= 0 if allow_zero else value > 0
    if not low_ok or value > 1:
        bound = "[0, 1]" if allow_zero else "(0, 1]"
        raise InvalidOptionsError(f"{field_name} must be in {bound}, got {value}")


def _check_int(value: int, field_name: str, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOptionsError(f"{field_name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidOptionsError(f"{field_name} must be >= {minimum}, got {value}")


@dataclass(frozen=True)
class RenderOptions:
    """Size, quiet zone, palette and error correction of the base QR code."""

    width: int = DEFAULT_WIDTH
    margin: int = DEFAULT_MARGIN
    dark_color: str = "#000000"
    light_color: str = "#FFFFFF"
    error_correction: str = "M"

    def validate(self) -> None:
        _check_int(self.width, "width", 1)
        _check_int(self.margin, "margin", 0)
        parse_color(self.dark_color, "dark_color")
        parse_color(self.light_color, "light_color")
        if self.error_correction not in ERROR_CORRECTION_LEVELS:
            raise InvalidOptionsError(
                f"error_correction must be one of {', '.join(ERROR_CORRECTION_LEVELS)}, "
                f"got {self.error_correction!r}"
            )


@dataclass(frozen=True)
class NoCenter:
    """Plain QR code, nothing drawn on top."""

    center_type = "none"

    def validate(self, width: int) -> None:
        pass


@dataclass(frozen=True)
class LogoCenter:
    """Logo image on a solid matte in the middle of the code.

    ``image_source`` is either a local path or an http(s) URL. Sizes are
    fractions of the code width unless the ``*_px`` fields are set, which
    take precedence.
    """

    image_source: str
    target_size_fraction: float = 0.20
    margin_fraction: float = 0.05
    background_color: str = "#FFFFFF"
    logo_size_px: int | None = None
    logo_margin_px: int | None = None

    center_type = "logo"

    def logo_size(self, width: int) -> int:
        if self.logo_size_px is not None:
            return self.logo_size_px
        return math.floor(width * self.target_size_fraction)

    def logo_margin(self, width: int) -> int:
        if self.logo_margin_px is not None:
            return self.logo_margin_px
        return math.floor(width * self.margin_fraction)

    def canvas_side(self, width: int) -> int:
        return self.logo_size(width) + 2 * self.logo_margin(width)

    def validate(self, width: int) -> None:
        if not isinstance(self.image_source, str) or not self.image_source.strip():
            raise InvalidOptionsError("logo centre requires an image_source")
        _check_fraction(self.target_size_fraction, "target_size_fraction")
        _check_fraction(self.margin_fraction, "margin_fraction", allow_zero=True)
        parse_color(self.background_color, "background_color")
        if self.logo_size_px is not None:
            _check_int(self.logo_size_px, "logo_size_px", 1)
        if self.logo_margin_px is not None:
            _check_int(self.logo_margin_px, "logo_margin_px", 0)
        if self.logo_size(width) < 1:
            raise InvalidOptionsError(f"logo size is empty at width {width}")
        if self.canvas_side(width) > width:
            raise InvalidOptionsError(
                f"logo canvas ({self.canvas_side(width)}px) is larger than the code ({width}px)"
            )


@dataclass(frozen=True)
class MonogramCenter:
    """Short bold text (e.g. initials) on a rounded badge.

    ``font_size_px`` and ``padding_px``, when set, override the matching
    fractions of the code width.
    """

    text: str = "M&E"
    font_size_fraction: float = 0.15
    font_family: str = "Arial, sans-serif"
    text_color: str = "#000000"
    background_color: str = "#FFFFFF"
    corner_radius: int = 8
    padding_fraction: float = 0.05
    font_size_px: int | None = None
    padding_px: int | None = None

    center_type = "monogram"

    def font_size(self, width: int) -> int:
        if self.font_size_px is not None:
            return self.font_size_px
        return math.floor(width * self.font_size_fraction)

    def padding(self, width: int) -> int:
        if self.padding_px is not None:
            return self.padding_px
        return math.floor(width * self.padding_fraction)

    def container_side(self, width: int) -> int:
        return self.font_size(width) + 2 * self.padding(width)

    def validate(self, width: int) -> None:
        if not isinstance(self.text, str) or not self.text.strip():
            raise InvalidOptionsError("monogram text must be a non-empty string")
        if "\n" in self.text or "\r" in self.text:
            raise InvalidOptionsError("monogram text must be a single line")
        _check_fraction(self.font_size_fraction, "font_size_fraction")
        _check_fraction(self.padding_fraction, "padding_fraction", allow_zero=True)
        if not isinstance(self.font_family, str) or not self.font_family.strip():
            raise InvalidOptionsError("font_family must be a non-empty string")
        parse_color(self.text_color, "text_color")
        parse_color(self.background_color, "background_color")
        _check_int(self.corner_radius, "corner_radius", 0)
        if self.font_size_px is not None:
            _check_int(self.font_size_px, "font_size_px", 1)
        if self.padding_px is not None:
            _check_int(self.padding_px, "padding_px", 0)
        if self.font_size(width) < 1:
            raise InvalidOptionsError(f"monogram font size is empty at width {width}")
        if self.container_side(width) > width:
            raise InvalidOptionsError(
                f"monogram badge ({self.container_side(width)}px) is larger than the code ({width}px)"
            )


CenterSpec = Union[NoCenter, LogoCenter, MonogramCenter]

# camelCase keys of web payloads, in addition to the dataclass field names.
# Size keys there are in pixels.
_LOGO_ALIASES = {
    "logoPath": "image_source",
    "logo_path": "image_source",
    "logoSize": "logo_size_px",
    "logoMargin": "logo_margin_px",
    "logoBackground": "background_color",
}
_MONOGRAM_ALIASES = {
    "monogram": "text",
    "fontSize": "font_size_px",
    "fontFamily": "font_family",
    "textColor": "text_color",
    "backgroundColor": "background_color",
    "borderRadius": "corner_radius",
    "padding": "padding_px",
}


def _from_mapping(cls, options: Mapping[str, Any], aliases: Mapping[str, str]):
    known = {f.name for f in fields(cls)}
    kwargs = {}
    for key, value in options.items():
        name = aliases.get(key, key)
        if name in known and value is not None:
            kwargs[name] = value
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise InvalidOptionsError(f"invalid {cls.__name__} options: {e}") from e


def build_center(center_type: str = "none", center_options: Any = None) -> CenterSpec:
    """Turn a ``center_type`` and its options into a centre spec.

    ``center_options`` may already be a spec instance (it must match
    ``center_type``) or a plain mapping as decoded from a JSON request.
    Unknown keys in a mapping are ignored.
    """
    if center_type not in CENTER_TYPES:
        raise InvalidOptionsError(
            f"center_type must be one of {', '.join(CENTER_TYPES)}, got {center_type!r}"
        )

    if isinstance(center_options, (NoCenter, LogoCenter, MonogramCenter)):
        if center_options.center_type != center_type:
            raise InvalidOptionsError(
                f"center_type {center_type!r} does not match {type(center_options).__name__}"
            )
        return center_options

    if center_options is None:
        center_options = {}
    if not isinstance(center_options, Mapping):
        raise InvalidOptionsError(f"center_options must be a mapping, got {type(center_options).__name__}")

    if center_type == "logo":
        return _from_mapping(LogoCenter, center_options, _LOGO_ALIASES)
    if center_type == "monogram":
        return _from_mapping(MonogramCenter, center_options, _MONOGRAM_ALIASES)
    return NoCenter()


def options_catalogue() -> dict:
    """Preset values offered to QR customisation UIs.

    Each list feeds the centre-options key of the same name: ``fontSizes``
    are pixel values for ``fontSize`` (``font_size_px``), ``fontFamilies``
    for ``fontFamily`` and so on. ``sizes`` and ``margins`` are
    ``RenderOptions.width`` and ``RenderOptions.margin``.
    """
    return {
        "sizes": [200, 300, 400, 500, 600],
        "margins": [1, 2, 3, 4],
        "colors": {
            "dark": ["#000000", "#1a1a1a", "#333333", "#555555"],
            "light": ["#ffffff", "#f5f5f5", "#eeeeee", "#e0e0e0"],
        },
        "formats": ["png"],
        "errorCorrectionLevels": list(ERROR_CORRECTION_LEVELS),
        "centerTypes": list(CENTER_TYPES),
        "monogramOptions": {
            "fontSizes": [20, 30, 40, 50, 60],
            "fontFamilies": ["Arial", "Helvetica", "Times New Roman", "Georgia", "Courier New"],
            "textColors": ["#000000", "#333333", "#666666", "#999999"],
            "backgroundColors": ["#ffffff", "#f5f5f5", "#eeeeee", "#e0e0e0"],
        },
    }
