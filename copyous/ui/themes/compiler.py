"""Template compilation helpers."""

from __future__ import annotations

from typing import Mapping

from copyous.errors import ErrorCode, ThemeError
from copyous.ui.themes.constants import COLOR_VARIABLES
from copyous.ui.themes.loader import PLACEHOLDER_RE, parse_template
from copyous.ui.themes.models import ColorScheme, Template


def resolve_template(template: Template, values: Mapping[str, str]) -> str:
    """Substitute every placeholder in ``template`` with its value.

    Raises ThemeError when a value names a placeholder outside the known set,
    or when a placeholder present in the text has no value.
    """
    unknown = sorted(name for name in values if name not in template.known)
    if unknown:
        raise ThemeError(
            ErrorCode.TEMPLATE_UNKNOWN_PLACEHOLDER,
            details={"placeholders": ", ".join(unknown)},
        )
    missing = sorted(name for name in template.placeholders if name not in values)
    if missing:
        raise ThemeError(
            ErrorCode.TEMPLATE_MISSING_VALUE,
            details={"placeholders": ", ".join(missing)},
        )
    return PLACEHOLDER_RE.sub(lambda match: values[match.group(1)], template.text)


def resolve_colors(scheme: ColorScheme | int, overrides: Mapping[str, str]) -> dict[str, str]:
    """Pick each variable's override, or the default for ``scheme`` when empty."""
    colors: dict[str, str] = {}
    for variable in COLOR_VARIABLES:
        override = (overrides.get(variable.name) or "").strip()
        colors[variable.name] = override or variable.default_for(int(scheme))
    return colors


def compile_custom_stylesheet(
    text: str,
    scheme: ColorScheme | int,
    overrides: Mapping[str, str],
) -> str:
    """Fill a custom template with resolved colors for ``scheme``."""
    return resolve_template(parse_template(text), resolve_colors(scheme, overrides))
