"""Runtime path helpers for source and frozen executable modes."""

from __future__ import annotations

import os
from pathlib import Path
import sys

THEME_RESOURCE_FILE = "theme.rcc"


def is_frozen() -> bool:
    """Return True when running from a PyInstaller bundle."""
    return bool(getattr(sys, "frozen", False))


def bundle_root() -> Path:
    """Return the runtime extraction root for frozen mode, else package parent."""
    if is_frozen():
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass)
    return Path(__file__).resolve().parent.parent


def package_root() -> Path:
    """Return the root path that contains the `copyous` package resources."""
    if is_frozen():
        root = bundle_root()
        candidate = root / "copyous"
        if candidate.exists():
            return candidate
        return root
    return Path(__file__).resolve().parent


def theme_resources_root() -> Path:
    """Resolve the directory holding pre-built stylesheets and templates."""
    return package_root() / "resources" / "theme"


def theme_resource_source() -> Path:
    """Return the compiled resource file when shipped, else the plain directory."""
    root = theme_resources_root()
    compiled = root / THEME_RESOURCE_FILE
    if compiled.is_file():
        return compiled
    return root


def user_data_root() -> Path:
    """Return the per-user data directory for generated artifacts."""
    base = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / "copyous"
