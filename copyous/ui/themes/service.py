"""Runtime theme resolution and stylesheet swapping."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from copyous.core.storage import write_atomic
from copyous.errors import ErrorCode, ThemeError, classify_exception, format_error_for_user
from copyous.ui.themes.compiler import compile_custom_stylesheet
from copyous.ui.themes.constants import (
    CUSTOM_STYLESHEET_NAME,
    STYLESHEET_RESOURCE,
    TEMPLATE_RESOURCE,
    THEME_SETTING_KEYS,
)
from copyous.ui.themes.context import StylesheetContext
from copyous.ui.themes.models import ColorScheme, ThemeMode
from copyous.ui.themes.registry import ResourceBundle
from copyous.ui.themes.system import SystemColorScheme
from copyous.ui.utils import SubscriptionSet

if TYPE_CHECKING:
    from copyous.config.settings import ThemeSettings

logger = logging.getLogger(__name__)


class ThemeManager(QObject):
    """Keep the presentation context styled according to the theme settings.

    Every settings change (or system color-scheme change) requests a new
    resolution pass. Passes run on the asyncio loop and may overlap while one
    of them awaits I/O; each pass carries a generation number and abandons
    without touching the presentation context once a newer request exists.
    At most one stylesheet is loaded at a time.
    """

    color_scheme_changed = Signal(object)

    def __init__(
        self,
        settings: ThemeSettings,
        bundle: ResourceBundle,
        context: StylesheetContext,
        system: SystemColorScheme,
        data_dir: Path | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._bundle = bundle
        self._context = context
        self._system = system
        self._data_dir = data_dir
        self._stylesheet: str | None = None
        self._color_scheme = ColorScheme.DARK
        self._generation = 0
        self._destroyed = False
        self._tasks: set[asyncio.Task] = set()
        self._write_lock = asyncio.Lock()
        self._subscriptions = SubscriptionSet()

        self._bundle.register()
        for key in THEME_SETTING_KEYS:
            self._subscriptions.add(settings.subscribe(key, self.request_update))
        self._subscriptions.connect(system.changed, self.request_update)

        self.request_update()

    @property
    def color_scheme(self) -> ColorScheme:
        return self._color_scheme

    @property
    def stylesheet(self) -> str | None:
        """Identity of the stylesheet currently loaded, if any."""
        return self._stylesheet

    @property
    def custom_stylesheet_path(self) -> Path:
        data_dir = self._data_dir if self._data_dir is not None else self._settings.data_dir
        return data_dir / CUSTOM_STYLESHEET_NAME

    def request_update(self) -> asyncio.Task | None:
        """Schedule a resolution pass on the running event loop."""
        if self._destroyed:
            return None
        self._generation += 1
        task = asyncio.ensure_future(self._update(self._generation))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    async def update_theme(self) -> None:
        """Run a resolution pass to completion."""
        self._generation += 1
        await self._update(self._generation)

    async def wait_idle(self) -> None:
        """Wait until no scheduled pass is pending."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def destroy(self) -> None:
        self._destroyed = True
        self._generation += 1
        self._subscriptions.dispose_all()
        self._bundle.unregister()

    # -- resolution --

    async def _update(self, generation: int) -> None:
        theme = self._settings.theme
        self._set_color_scheme(self._effective_scheme(theme))
        scheme = self._color_scheme

        if theme is ThemeMode.CUSTOM:
            try:
                await self._apply_custom(scheme, generation)
                return
            except (OSError, UnicodeError, ThemeError) as exc:
                if not self._is_current(generation):
                    return
                error = classify_exception(exc, self.custom_stylesheet_path)
                logger.error(
                    "Custom theme failed, falling back to dark: %s",
                    format_error_for_user(error),
                )
                scheme = ColorScheme.DARK

        if not self._is_current(generation):
            return
        self._apply_builtin(scheme)

    async def _apply_custom(self, scheme: ColorScheme, generation: int) -> None:
        contents = await self._bundle.read_bytes(TEMPLATE_RESOURCE.format(scheme=scheme.nick))
        if not self._is_current(generation):
            logger.debug("Superseded custom theme pass %d after template read", generation)
            return

        css = compile_custom_stylesheet(
            contents.decode("utf-8"),
            scheme,
            self._settings.custom_colors(),
        )
        path = self.custom_stylesheet_path
        async with self._write_lock:
            if not self._is_current(generation):
                return
            try:
                await asyncio.to_thread(write_atomic, path, css.encode("utf-8"))
            except OSError as exc:
                raise ThemeError(
                    ErrorCode.FILE_WRITE_FAILED,
                    path=path,
                    details={"original": str(exc)},
                ) from exc
        if not self._is_current(generation):
            logger.debug("Superseded custom theme pass %d after write", generation)
            return

        identity = str(path)
        self._unload_current()
        self._context.load_stylesheet(identity)
        self._stylesheet = identity
        logger.info("Loaded custom %s theme from %s", scheme.nick, identity)

    def _apply_builtin(self, scheme: ColorScheme) -> None:
        identity = self._bundle.identity(STYLESHEET_RESOURCE.format(scheme=scheme.nick))
        if self._stylesheet == identity:
            return
        try:
            self._unload_current()
            self._context.load_stylesheet(identity)
            self._stylesheet = identity
            logger.info("Loaded %s stylesheet %s", scheme.nick, identity)
        except ThemeError as exc:
            logger.error("Failed to load stylesheet %s: %s", identity, format_error_for_user(exc))

    def _unload_current(self) -> None:
        if self._stylesheet is not None:
            self._context.unload_stylesheet(self._stylesheet)
            self._stylesheet = None

    def _effective_scheme(self, theme: ThemeMode) -> ColorScheme:
        if theme is ThemeMode.SYSTEM:
            return self._system.color_scheme()
        if theme is ThemeMode.DARK:
            return ColorScheme.DARK
        if theme is ThemeMode.LIGHT:
            return ColorScheme.LIGHT
        return self._settings.custom_color_scheme

    def _set_color_scheme(self, scheme: ColorScheme) -> None:
        if scheme == self._color_scheme:
            return
        self._color_scheme = scheme
        self.color_scheme_changed.emit(scheme)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Theme update failed: %s", exc, exc_info=exc)
