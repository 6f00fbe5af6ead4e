"""Theme framework constants."""

from __future__ import annotations

from copyous.ui.themes.models import ColorVariable

THEME_KEY = "theme"
CUSTOM_COLOR_SCHEME_KEY = "custom-color-scheme"

COLOR_VARIABLES: tuple[ColorVariable, ...] = (
    ColorVariable(
        name="bg_color",
        key="custom-bg-color",
        defaults=("rgb(54,54,58)", "rgb(250,250,251)"),
    ),
    ColorVariable(
        name="fg_color",
        key="custom-fg-color",
        defaults=("rgb(255,255,255)", "rgb(34,34,38)"),
    ),
    ColorVariable(
        name="card_bg_color",
        key="custom-card-bg-color",
        defaults=("rgb(71,71,76)", "rgb(255,255,255)"),
    ),
    ColorVariable(
        name="search_bg_color",
        key="custom-search-bg-color",
        defaults=("rgb(71,71,76)", "rgb(255,255,255)"),
    ),
)

PLACEHOLDER_NAMES: frozenset[str] = frozenset(variable.name for variable in COLOR_VARIABLES)

THEME_SETTING_KEYS: tuple[str, ...] = (
    THEME_KEY,
    CUSTOM_COLOR_SCHEME_KEY,
    *(variable.key for variable in COLOR_VARIABLES),
)

RESOURCE_PREFIX = "/copyous"
TEMPLATE_RESOURCE = "template-{scheme}.css"
STYLESHEET_RESOURCE = "stylesheet-{scheme}.css"
CUSTOM_STYLESHEET_NAME = "custom-theme.css"
