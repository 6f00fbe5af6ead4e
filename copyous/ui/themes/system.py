"""System-wide light/dark preference monitoring."""

from __future__ import annotations

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtGui import QGuiApplication, QStyleHints

from copyous.ui.themes.models import ColorScheme


class SystemColorScheme(QObject):
    """Reports the desktop color-scheme preference and signals changes."""

    changed = Signal()

    def __init__(self, style_hints: QStyleHints | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        if style_hints is None and QGuiApplication.instance() is not None:
            style_hints = QGuiApplication.styleHints()
        self._style_hints = style_hints
        if self._style_hints is not None:
            self._style_hints.colorSchemeChanged.connect(self._on_color_scheme_changed)

    def prefers_light(self) -> bool:
        if self._style_hints is None:
            return False
        return self._style_hints.colorScheme() == Qt.ColorScheme.Light

    def color_scheme(self) -> ColorScheme:
        """Light only on an explicit light preference, otherwise Dark."""
        return ColorScheme.LIGHT if self.prefers_light() else ColorScheme.DARK

    def close(self) -> None:
        if self._style_hints is not None:
            self._style_hints.colorSchemeChanged.disconnect(self._on_color_scheme_changed)
            self._style_hints = None

    def _on_color_scheme_changed(self, _scheme) -> None:
        self.changed.emit()
