"""Theme preferences: theme selection and custom color rows."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QColorDialog,
    QComboBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from copyous.ui.themes.constants import COLOR_VARIABLES, CUSTOM_COLOR_SCHEME_KEY, THEME_KEY
from copyous.ui.themes.loader import format_color, parse_color
from copyous.ui.themes.models import ColorScheme, ColorVariable, ThemeMode, clamp_index
from copyous.ui.utils import SubscriptionSet

if TYPE_CHECKING:
    from copyous.config.settings import ThemeSettings


THEME_MODE_ITEMS: tuple[tuple[str, ThemeMode], ...] = (
    ("System", ThemeMode.SYSTEM),
    ("Dark", ThemeMode.DARK),
    ("Light", ThemeMode.LIGHT),
    ("Custom", ThemeMode.CUSTOM),
)

COLOR_SCHEME_ITEMS: tuple[tuple[str, ColorScheme], ...] = (
    ("Dark", ColorScheme.DARK),
    ("Light", ColorScheme.LIGHT),
)

COLOR_ROW_TEXT: dict[str, tuple[str, str]] = {
    "bg_color": ("Background Color", "Set the background color of the clipboard dialog"),
    "fg_color": ("Text Color", "Set the text color of the clipboard dialog"),
    "card_bg_color": ("Item Color", "Set the background color of clipboard items"),
    "search_bg_color": ("Search Color", "Set the background color of the search bar"),
}


class ColorRow(QWidget):
    """Titled color swatch that opens a color dialog, with a reset button."""

    color_changed = Signal(str)
    reset_requested = Signal()

    def __init__(self, title: str, subtitle: str = "", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._color = ""
        self._title = QLabel(title)
        self._subtitle = QLabel(subtitle)
        self._subtitle.setObjectName("StatusDetail")
        self._subtitle.setWordWrap(True)
        self._swatch_btn = QPushButton()
        self._swatch_btn.setFixedWidth(64)
        self._swatch_btn.clicked.connect(self._choose_color)
        self._reset_btn = QPushButton("Reset")
        self._reset_btn.clicked.connect(self.reset_requested)

        text = QVBoxLayout()
        text.setContentsMargins(0, 0, 0, 0)
        text.addWidget(self._title)
        text.addWidget(self._subtitle)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(text, 1)
        layout.addWidget(self._reset_btn)
        layout.addWidget(self._swatch_btn)

    @property
    def color(self) -> str:
        return self._color

    @color.setter
    def color(self, value: str) -> None:
        # Unparseable literals leave the row unchanged.
        if parse_color(value) is None or value == self._color:
            return
        self._color = value
        self._update_swatch()
        self.color_changed.emit(value)

    def _choose_color(self) -> None:
        initial = parse_color(self._color) or QColor()
        chosen = QColorDialog.getColor(
            initial,
            self,
            self._title.text(),
            QColorDialog.ColorDialogOption.ShowAlphaChannel,
        )
        if chosen.isValid():
            self.color = format_color(chosen)

    def _update_swatch(self) -> None:
        self._swatch_btn.setStyleSheet(f"background-color: {self._color};")
        self._swatch_btn.setToolTip(self._color)


def bind_color(settings: ThemeSettings, variable: ColorVariable, row: ColorRow) -> SubscriptionSet:
    """Keep ``row`` and the variable's override setting in sync.

    An empty override shows the default for the custom color scheme; picking
    that default again stores an empty override.
    """

    def current_default() -> str:
        return variable.default_for(settings.get_enum(CUSTOM_COLOR_SCHEME_KEY))

    def set_color() -> None:
        row.color = settings.get_string(variable.key) or current_default()

    def get_color() -> None:
        color = row.color
        settings.set_string(variable.key, "" if color == current_default() else color)

    subscriptions = SubscriptionSet()
    set_color()
    subscriptions.add(settings.subscribe(CUSTOM_COLOR_SCHEME_KEY, set_color))
    subscriptions.add(settings.subscribe(variable.key, set_color))
    subscriptions.connect(row.color_changed, lambda _color: get_color())
    subscriptions.connect(row.reset_requested, lambda: settings.reset(variable.key))
    return subscriptions


def bind_combo(settings: ThemeSettings, key: str, combo: QComboBox) -> SubscriptionSet:
    """Bind an enum setting to a combo whose item data holds the enum values."""

    def set_index() -> None:
        value = settings.get_enum(key)
        index = combo.findData(value)
        if index < 0:
            index = clamp_index(value, combo.count())
        # A clamped index must not be written back over the raw value.
        combo.blockSignals(True)
        combo.setCurrentIndex(index)
        combo.blockSignals(False)

    def get_index(_index: int) -> None:
        value = combo.currentData()
        if value is not None:
            settings.set_enum(key, int(value))

    subscriptions = SubscriptionSet()
    set_index()
    subscriptions.add(settings.subscribe(key, set_index))
    subscriptions.connect(combo.currentIndexChanged, get_index)
    return subscriptions


class ThemeCustomization(QGroupBox):
    """Preferences group for the theme mode and custom colors."""

    def __init__(self, settings: ThemeSettings, parent: QWidget | None = None) -> None:
        super().__init__("Theme", parent)
        self._settings = settings
        self._subscriptions = SubscriptionSet()
        self._setup_ui()
        self._bind()

    @property
    def color_rows(self) -> dict[str, ColorRow]:
        return dict(self._color_rows)

    @property
    def theme_combo(self) -> QComboBox:
        return self._theme_combo

    @property
    def color_scheme_combo(self) -> QComboBox:
        return self._color_scheme_combo

    def _setup_ui(self) -> None:
        form = QFormLayout(self)

        self._theme_combo = QComboBox()
        self._theme_combo.setToolTip("Set the preferred theme")
        for label, mode in THEME_MODE_ITEMS:
            self._theme_combo.addItem(label, int(mode))

        self._color_scheme_combo = QComboBox()
        self._color_scheme_combo.setToolTip("Set the color scheme of the custom theme")
        for label, scheme in COLOR_SCHEME_ITEMS:
            self._color_scheme_combo.addItem(label, int(scheme))

        form.addRow("Theme:", self._theme_combo)
        form.addRow("Color Scheme:", self._color_scheme_combo)

        self._color_rows: dict[str, ColorRow] = {}
        for variable in COLOR_VARIABLES:
            title, subtitle = COLOR_ROW_TEXT[variable.name]
            row = ColorRow(title, subtitle)
            self._color_rows[variable.name] = row
            form.addRow(row)

    def _bind(self) -> None:
        self._subscriptions.add(self._settings.subscribe(THEME_KEY, self._update_sensitivity))
        bindings = [
            bind_combo(self._settings, THEME_KEY, self._theme_combo),
            bind_combo(self._settings, CUSTOM_COLOR_SCHEME_KEY, self._color_scheme_combo),
        ]
        for variable in COLOR_VARIABLES:
            bindings.append(bind_color(self._settings, variable, self._color_rows[variable.name]))
        self._bindings = bindings
        self._update_sensitivity()

    def unbind(self) -> None:
        self._subscriptions.dispose_all()
        for binding in self._bindings:
            binding.dispose_all()

    def _update_sensitivity(self) -> None:
        custom = self._settings.theme is ThemeMode.CUSTOM
        self._color_scheme_combo.setEnabled(custom)
        for row in self._color_rows.values():
            row.setEnabled(custom)
