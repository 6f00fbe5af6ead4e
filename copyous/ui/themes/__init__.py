"""Theme resolution framework exports."""

from copyous.ui.themes.constants import COLOR_VARIABLES, PLACEHOLDER_NAMES
from copyous.ui.themes.context import ApplicationStylesheetContext, StylesheetContext
from copyous.ui.themes.models import ColorScheme, ColorVariable, Contrast, Template, ThemeMode
from copyous.ui.themes.registry import ResourceBundle
from copyous.ui.themes.service import ThemeManager
from copyous.ui.themes.system import SystemColorScheme

__all__ = [
    "COLOR_VARIABLES",
    "PLACEHOLDER_NAMES",
    "ApplicationStylesheetContext",
    "ColorScheme",
    "ColorVariable",
    "Contrast",
    "ResourceBundle",
    "StylesheetContext",
    "SystemColorScheme",
    "Template",
    "ThemeManager",
    "ThemeMode",
]
