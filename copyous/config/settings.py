"""Theme settings via QSettings with change notification."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from PySide6.QtCore import QObject, QSettings, Signal

from copyous.runtime_paths import user_data_root
from copyous.ui.themes.constants import COLOR_VARIABLES, CUSTOM_COLOR_SCHEME_KEY, THEME_KEY
from copyous.ui.themes.models import ColorScheme, ThemeMode
from copyous.ui.utils import Subscription

# Enum keys are stored by nick; index is the position in the tuple.
ENUM_NICKS: dict[str, tuple[str, ...]] = {
    THEME_KEY: tuple(mode.nick for mode in ThemeMode),
    CUSTOM_COLOR_SCHEME_KEY: tuple(scheme.nick for scheme in ColorScheme),
}

ENUM_DEFAULTS: dict[str, int] = {
    THEME_KEY: ThemeMode.SYSTEM,
    CUSTOM_COLOR_SCHEME_KEY: ColorScheme.DARK,
}

STRING_KEYS: frozenset[str] = frozenset(variable.key for variable in COLOR_VARIABLES)


class ThemeSettings(QObject):
    """Wraps QSettings for the theme keys and notifies on changes."""

    changed = Signal(str)

    def __init__(
        self,
        qsettings: QSettings | None = None,
        data_dir: Path | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._qs = qsettings if qsettings is not None else QSettings("Copyous", "Copyous")
        self._data_dir = data_dir

    @classmethod
    def from_file(cls, path: Path, data_dir: Path | None = None) -> ThemeSettings:
        return cls(QSettings(str(path), QSettings.Format.IniFormat), data_dir=data_dir)

    # -- raw access --

    def get_enum(self, key: str) -> int:
        nicks = self._nicks(key)
        raw = self._qs.value(f"theme/{key}", None)
        if isinstance(raw, str):
            cleaned = raw.strip().lower()
            if cleaned in nicks:
                return nicks.index(cleaned)
            if cleaned.lstrip("-").isdigit():
                return int(cleaned)
        elif isinstance(raw, int):
            return raw
        return int(ENUM_DEFAULTS[key])

    def set_enum(self, key: str, value: int) -> None:
        nicks = self._nicks(key)
        index = int(value)
        stored: str = nicks[index] if 0 <= index < len(nicks) else str(index)
        self._store(key, stored, current=self._raw(key))

    def get_string(self, key: str) -> str:
        self._check_string_key(key)
        raw = self._qs.value(f"theme/{key}", "", type=str)
        return (raw or "").strip()

    def set_string(self, key: str, value: str) -> None:
        self._check_string_key(key)
        self._store(key, (value or "").strip(), current=self.get_string(key))

    def reset(self, key: str) -> None:
        if key in STRING_KEYS:
            self.set_string(key, "")
        else:
            self.set_enum(key, ENUM_DEFAULTS[key])

    def subscribe(self, key: str, callback: Callable[[], None]) -> Subscription:
        """Call ``callback`` whenever ``key`` changes; dispose the handle to stop."""

        def _on_changed(changed_key: str) -> None:
            if changed_key == key:
                callback()

        self.changed.connect(_on_changed)
        return Subscription(self.changed, _on_changed)

    # -- typed access --

    @property
    def theme(self) -> ThemeMode:
        value = self.get_enum(THEME_KEY)
        try:
            return ThemeMode(value)
        except ValueError:
            return ThemeMode.SYSTEM

    @theme.setter
    def theme(self, value: ThemeMode) -> None:
        self.set_enum(THEME_KEY, value)

    @property
    def custom_color_scheme(self) -> ColorScheme:
        return ColorScheme.from_index(self.get_enum(CUSTOM_COLOR_SCHEME_KEY))

    @custom_color_scheme.setter
    def custom_color_scheme(self, value: ColorScheme) -> None:
        self.set_enum(CUSTOM_COLOR_SCHEME_KEY, value)

    def custom_colors(self) -> dict[str, str]:
        """Return stored overrides keyed by color variable name."""
        return {variable.name: self.get_string(variable.key) for variable in COLOR_VARIABLES}

    # -- helpers --

    @property
    def data_dir(self) -> Path:
        path = self._data_dir if self._data_dir is not None else user_data_root()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _store(self, key: str, value: str, *, current: object) -> None:
        if value == current:
            return
        self._qs.setValue(f"theme/{key}", value)
        self.changed.emit(key)

    def _raw(self, key: str) -> str | None:
        raw = self._qs.value(f"theme/{key}", None)
        return None if raw is None else str(raw)

    @staticmethod
    def _nicks(key: str) -> tuple[str, ...]:
        try:
            return ENUM_NICKS[key]
        except KeyError:
            raise KeyError(f"Not an enum theme key: {key!r}") from None

    @staticmethod
    def _check_string_key(key: str) -> None:
        if key not in STRING_KEYS:
            raise KeyError(f"Not a string theme key: {key!r}")
