"""Template parsing and color literal handling."""

from __future__ import annotations

import re
from typing import Iterable

from PySide6.QtGui import QColor

from copyous.errors import ErrorCode, ThemeError
from copyous.ui.themes.constants import PLACEHOLDER_NAMES
from copyous.ui.themes.models import Template

PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}")
_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_COLOR_RE = re.compile(r"^(?:rgb|rgba|hsl|hsla)\([^)]+\)$", re.IGNORECASE)

_MAX_COLOR_VALUE_LEN = 64


def parse_template(text: str, *, known: Iterable[str] = PLACEHOLDER_NAMES) -> Template:
    """Scan template text for placeholders, rejecting names outside ``known``."""
    known_names = frozenset(known)
    found = frozenset(match.group(1) for match in PLACEHOLDER_RE.finditer(text))
    unknown = sorted(found - known_names)
    if unknown:
        raise ThemeError(
            ErrorCode.TEMPLATE_UNKNOWN_PLACEHOLDER,
            details={"placeholders": ", ".join(unknown)},
        )
    return Template(text=text, placeholders=found, known=known_names)


def is_valid_color(value: str) -> bool:
    cleaned = value.strip()
    if not cleaned or len(cleaned) > _MAX_COLOR_VALUE_LEN:
        return False
    if _HEX_COLOR_RE.match(cleaned):
        return True
    if _FUNC_COLOR_RE.match(cleaned):
        return True
    return QColor.isValidColorName(cleaned)


def parse_color(value: str) -> QColor | None:
    """Parse a CSS color literal (hex, rgb/rgba, hsl/hsla or a name)."""
    cleaned = (value or "").strip()
    if not is_valid_color(cleaned):
        return None
    lowered = cleaned.lower()
    if lowered.startswith("#") and len(lowered) == 9:
        # CSS order is #rrggbbaa, Qt expects #aarrggbb
        cleaned = "#" + lowered[7:9] + lowered[1:7]
    elif lowered.startswith(("rgb", "hsl")):
        return _parse_color_function(lowered)
    color = QColor(cleaned)
    return color if color.isValid() else None


def format_color(color: QColor) -> str:
    """Format a color as ``rgb(r,g,b)`` or ``rgba(r,g,b,a)``."""
    if color.alpha() == 255:
        return f"rgb({color.red()},{color.green()},{color.blue()})"
    return f"rgba({color.red()},{color.green()},{color.blue()},{color.alphaF():g})"


def _parse_color_function(value: str) -> QColor | None:
    name, _, rest = value.partition("(")
    parts = [part.strip() for part in rest.rstrip(")").replace("/", ",").split(",")]
    if len(parts) not in (3, 4):
        return None
    try:
        alpha = _unit(parts[3]) if len(parts) == 4 else 1.0
        if name.startswith("rgb"):
            red, green, blue = (_channel(part) for part in parts[:3])
            color = QColor(red, green, blue)
        else:
            hue = float(parts[0].removesuffix("deg")) % 360 / 360
            color = QColor.fromHslF(hue, _unit(parts[1]), _unit(parts[2]))
    except ValueError:
        return None
    color.setAlphaF(alpha)
    return color if color.isValid() else None


def _channel(part: str) -> int:
    if part.endswith("%"):
        return round(min(max(float(part[:-1]), 0.0), 100.0) * 2.55)
    return min(max(round(float(part)), 0), 255)


def _unit(part: str) -> float:
    if part.endswith("%"):
        return min(max(float(part[:-1]) / 100, 0.0), 1.0)
    return min(max(float(part), 0.0), 1.0)
