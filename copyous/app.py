"""QApplication bootstrap for the theme preferences window."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys

from PySide6 import QtAsyncio
from PySide6.QtWidgets import QApplication, QVBoxLayout, QWidget

from copyous.config.settings import ThemeSettings
from copyous.runtime_paths import is_frozen, package_root, theme_resource_source
from copyous.ui.customization import ThemeCustomization
from copyous.ui.themes.constants import STYLESHEET_RESOURCE, TEMPLATE_RESOURCE
from copyous.ui.themes.context import ApplicationStylesheetContext
from copyous.ui.themes.models import ColorScheme
from copyous.ui.themes.registry import ResourceBundle
from copyous.ui.themes.service import ThemeManager
from copyous.ui.themes.system import SystemColorScheme

logger = logging.getLogger(__name__)


def _configure_logger(settings: ThemeSettings) -> logging.Logger:
    logger = logging.getLogger("copyous")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    log_dir = settings.data_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / "copyous.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def missing_theme_resources(bundle: ResourceBundle) -> list[str]:
    """Names of the stylesheets and templates a registered bundle lacks."""
    names = [
        pattern.format(scheme=scheme.nick)
        for scheme in ColorScheme
        for pattern in (STYLESHEET_RESOURCE, TEMPLATE_RESOURCE)
    ]
    return [name for name in names if not bundle.exists(name)]


def create_theme_manager(
    app: QApplication,
    settings: ThemeSettings,
    system: SystemColorScheme,
) -> ThemeManager:
    """Build a ThemeManager that styles ``app``. Needs a running event loop."""
    bundle = ResourceBundle(theme_resource_source())
    context = ApplicationStylesheetContext(app)
    manager = ThemeManager(settings, bundle, context, system)
    missing = missing_theme_resources(bundle)
    if missing:
        logger.warning("theme resources missing from %s: %s", bundle.source, ", ".join(missing))
    return manager


def run_app() -> int:
    """Show the theme preferences window and apply the theme live."""
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Copyous")
    app.setOrganizationName("Copyous")
    settings = ThemeSettings()
    app_logger = _configure_logger(settings)
    app_logger.info("startup mode frozen=%s package_root=%s", is_frozen(), package_root())

    window = QWidget()
    window.setWindowTitle("Copyous Preferences")
    window.setMinimumWidth(520)
    layout = QVBoxLayout(window)
    customization = ThemeCustomization(settings)
    layout.addWidget(customization)
    window.show()

    async def start() -> None:
        system = SystemColorScheme(app.styleHints())
        manager = create_theme_manager(app, settings, system)
        manager.color_scheme_changed.connect(
            lambda scheme: app_logger.info("color scheme is now %s", scheme.nick)
        )

        def shutdown() -> None:
            customization.unbind()
            manager.destroy()
            system.close()

        app.aboutToQuit.connect(shutdown)

    QtAsyncio.run(start(), keep_running=True, quit_qapp=True, handle_sigint=True)
    return 0
