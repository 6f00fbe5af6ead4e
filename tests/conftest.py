"""Shared fixtures for the Copyous test suite."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from copyous.config.settings import ThemeSettings  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """Create a QApplication shared by every widget test."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def settings(tmp_path: Path) -> ThemeSettings:
    """Theme settings backed by a throwaway INI file."""
    return ThemeSettings.from_file(tmp_path / "settings.ini", data_dir=tmp_path / "data")
