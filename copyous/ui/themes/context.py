"""Presentation contexts that stylesheets are loaded into."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtWidgets import QApplication

from copyous.errors import ErrorCode, ThemeError
from copyous.ui.themes.registry import read_resource

logger = logging.getLogger(__name__)


class StylesheetContext:
    """Live styling target that accepts stylesheets by identity.

    Both operations raise ThemeError when the identity is invalid or unreadable.
    """

    def load_stylesheet(self, identity: str) -> None:
        raise NotImplementedError

    def unload_stylesheet(self, identity: str) -> None:
        raise NotImplementedError


class ApplicationStylesheetContext(StylesheetContext):
    """Applies loaded stylesheets, in load order, to a QApplication."""

    def __init__(self, app: QApplication, base_stylesheet: str = "") -> None:
        self._app = app
        self._base_stylesheet = base_stylesheet
        self._loaded: dict[str, str] = {}

    @property
    def loaded(self) -> list[str]:
        return list(self._loaded)

    def load_stylesheet(self, identity: str) -> None:
        if identity in self._loaded:
            raise ThemeError(
                ErrorCode.STYLESHEET_LOAD_FAILED,
                message="Stylesheet is already loaded.",
                path=Path(identity),
            )
        try:
            text = read_resource(identity).decode("utf-8")
        except (ThemeError, UnicodeDecodeError) as exc:
            raise ThemeError(
                ErrorCode.STYLESHEET_LOAD_FAILED,
                path=Path(identity),
                details={"original": str(exc)},
            ) from exc
        self._loaded[identity] = text
        self._apply()
        logger.debug("Loaded stylesheet %s", identity)

    def unload_stylesheet(self, identity: str) -> None:
        if self._loaded.pop(identity, None) is None:
            raise ThemeError(
                ErrorCode.STYLESHEET_UNLOAD_FAILED,
                message="Stylesheet is not loaded.",
                path=Path(identity),
            )
        self._apply()
        logger.debug("Unloaded stylesheet %s", identity)

    def _apply(self) -> None:
        parts = [self._base_stylesheet, *self._loaded.values()]
        self._app.setStyleSheet("\n".join(part for part in parts if part))
