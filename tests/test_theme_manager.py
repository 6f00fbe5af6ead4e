"""Tests for runtime theme resolution and stylesheet swapping."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from copyous.config.settings import ThemeSettings
from copyous.errors import ErrorCode, ThemeError
from copyous.ui.themes.context import StylesheetContext
from copyous.ui.themes.models import ColorScheme, ThemeMode
from copyous.ui.themes.registry import ResourceBundle
from copyous.ui.themes.service import ThemeManager
from copyous.ui.themes.system import SystemColorScheme

TEMPLATE = ".copyous-dialog { background-color: ${bg_color}; color: ${fg_color}; }\n"


class RecordingContext(StylesheetContext):
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.loaded: list[str] = []
        self.fail_on: set[str] = set()

    def load_stylesheet(self, identity: str) -> None:
        self.calls.append(("load", identity))
        if identity in self.fail_on:
            raise ThemeError(ErrorCode.STYLESHEET_LOAD_FAILED, path=Path(identity))
        self.loaded.append(identity)

    def unload_stylesheet(self, identity: str) -> None:
        self.calls.append(("unload", identity))
        self.loaded.remove(identity)


class FakeSystemColorScheme(SystemColorScheme):
    def __init__(self) -> None:
        super().__init__()
        self.light = False

    def prefers_light(self) -> bool:
        return self.light

    def set_prefers_light(self, light: bool) -> None:
        self.light = light
        self.changed.emit()


class GatedBundle(ResourceBundle):
    """Bundle whose reads wait until the test opens the gate."""

    def __init__(self, source: Path) -> None:
        super().__init__(source)
        self.gate = asyncio.Event()

    async def read_bytes(self, name: str) -> bytes:
        await self.gate.wait()
        return await super().read_bytes(name)


class Env:
    def __init__(self, tmp_path: Path) -> None:
        self.resources = tmp_path / "theme"
        self.resources.mkdir()
        for scheme in ("dark", "light"):
            (self.resources / f"stylesheet-{scheme}.css").write_text(f"/* {scheme} */\n", encoding="utf-8")
            (self.resources / f"template-{scheme}.css").write_text(TEMPLATE, encoding="utf-8")
        self.data_dir = tmp_path / "data"
        self.settings = ThemeSettings.from_file(tmp_path / "settings.ini", data_dir=self.data_dir)
        self.context = RecordingContext()
        self.system = FakeSystemColorScheme()
        self.bundle = ResourceBundle(self.resources)

    def create(self) -> ThemeManager:
        return ThemeManager(self.settings, self.bundle, self.context, self.system)

    def stylesheet(self, scheme: str) -> str:
        return self.bundle.identity(f"stylesheet-{scheme}.css")

    @property
    def custom_path(self) -> Path:
        return self.data_dir / "custom-theme.css"


@pytest.fixture
def env(tmp_path: Path) -> Env:
    return Env(tmp_path)


def _errors(caplog) -> list[logging.LogRecord]:
    return [
        record
        for record in caplog.records
        if record.levelno >= logging.ERROR and record.name == "copyous.ui.themes.service"
    ]


@pytest.mark.asyncio
async def test_builtin_theme_loads_prebuilt_stylesheet(env: Env) -> None:
    env.settings.theme = ThemeMode.LIGHT
    manager = env.create()
    await manager.wait_idle()

    assert env.context.loaded == [env.stylesheet("light")]
    assert manager.stylesheet == env.stylesheet("light")
    assert manager.color_scheme is ColorScheme.LIGHT
    assert env.bundle.registered


@pytest.mark.asyncio
async def test_repeated_update_is_idempotent(env: Env) -> None:
    env.settings.theme = ThemeMode.DARK
    manager = env.create()
    await manager.wait_idle()
    env.context.calls.clear()

    await manager.update_theme()
    await manager.update_theme()

    assert env.context.calls == []
    assert env.context.loaded == [env.stylesheet("dark")]


@pytest.mark.asyncio
async def test_system_mode_follows_system_preference(env: Env) -> None:
    manager = env.create()
    await manager.wait_idle()
    assert env.context.loaded == [env.stylesheet("dark")]

    env.system.set_prefers_light(True)
    await manager.wait_idle()

    assert env.context.loaded == [env.stylesheet("light")]
    assert env.context.calls[-2:] == [
        ("unload", env.stylesheet("dark")),
        ("load", env.stylesheet("light")),
    ]


@pytest.mark.asyncio
async def test_color_scheme_changed_only_on_actual_change(env: Env) -> None:
    env.settings.theme = ThemeMode.DARK
    manager = env.create()
    schemes: list[ColorScheme] = []
    manager.color_scheme_changed.connect(schemes.append)
    await manager.wait_idle()

    env.settings.theme = ThemeMode.LIGHT
    await manager.wait_idle()
    env.settings.set_string("custom-bg-color", "#123456")
    await manager.wait_idle()
    env.settings.theme = ThemeMode.SYSTEM
    await manager.wait_idle()

    assert schemes == [ColorScheme.LIGHT, ColorScheme.DARK]


@pytest.mark.asyncio
async def test_custom_theme_writes_and_loads_resolved_stylesheet(env: Env) -> None:
    env.settings.theme = ThemeMode.CUSTOM
    env.settings.custom_color_scheme = ColorScheme.LIGHT
    env.settings.set_string("custom-bg-color", "#123456")
    manager = env.create()
    await manager.wait_idle()

    css = env.custom_path.read_text(encoding="utf-8")
    assert css == ".copyous-dialog { background-color: #123456; color: rgb(34,34,38); }\n"
    assert env.context.loaded == [str(env.custom_path)]
    assert manager.color_scheme is ColorScheme.LIGHT


@pytest.mark.asyncio
async def test_custom_color_change_reloads_custom_stylesheet(env: Env) -> None:
    env.settings.theme = ThemeMode.CUSTOM
    manager = env.create()
    await manager.wait_idle()
    env.context.calls.clear()

    env.settings.set_string("custom-fg-color", "red")
    await manager.wait_idle()

    assert env.context.calls == [("unload", str(env.custom_path)), ("load", str(env.custom_path))]
    assert "color: red;" in env.custom_path.read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_out_of_range_custom_scheme_is_clamped(env: Env) -> None:
    env.settings.theme = ThemeMode.CUSTOM
    env.settings.set_enum("custom-color-scheme", 5)
    manager = env.create()
    await manager.wait_idle()

    assert manager.color_scheme is ColorScheme.LIGHT
    assert "rgb(250,250,251)" in env.custom_path.read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_custom_write_failure_falls_back_to_dark(env: Env, monkeypatch, caplog) -> None:
    def fail_write(path: Path, data: bytes) -> Path:
        raise OSError("disk full")

    monkeypatch.setattr("copyous.ui.themes.service.write_atomic", fail_write)
    env.settings.theme = ThemeMode.CUSTOM
    env.settings.custom_color_scheme = ColorScheme.LIGHT

    with caplog.at_level(logging.INFO):
        manager = env.create()
        await manager.wait_idle()

    assert env.context.loaded == [env.stylesheet("dark")]
    assert manager.stylesheet == env.stylesheet("dark")
    errors = _errors(caplog)
    assert len(errors) == 1
    assert "disk full" in errors[0].getMessage()


@pytest.mark.asyncio
async def test_missing_custom_template_falls_back_to_dark(env: Env, caplog) -> None:
    (env.resources / "template-light.css").unlink()
    env.settings.theme = ThemeMode.CUSTOM
    env.settings.custom_color_scheme = ColorScheme.LIGHT

    with caplog.at_level(logging.INFO):
        manager = env.create()
        await manager.wait_idle()

    assert env.context.loaded == [env.stylesheet("dark")]
    assert len(_errors(caplog)) == 1
    assert not env.custom_path.exists()


@pytest.mark.asyncio
async def test_template_with_unknown_placeholder_falls_back_to_dark(env: Env, caplog) -> None:
    (env.resources / "template-dark.css").write_text(".a { color: ${shadow}; }", encoding="utf-8")
    env.settings.theme = ThemeMode.CUSTOM

    with caplog.at_level(logging.INFO):
        manager = env.create()
        await manager.wait_idle()

    assert env.context.loaded == [env.stylesheet("dark")]
    assert len(_errors(caplog)) == 1


@pytest.mark.asyncio
async def test_builtin_load_failure_leaves_no_stylesheet(env: Env, caplog) -> None:
    env.settings.theme = ThemeMode.DARK
    manager = env.create()
    await manager.wait_idle()
    env.context.fail_on.add(env.stylesheet("light"))

    with caplog.at_level(logging.INFO):
        env.settings.theme = ThemeMode.LIGHT
        await manager.wait_idle()

    assert env.context.loaded == []
    assert manager.stylesheet is None
    assert len(_errors(caplog)) == 1


@pytest.mark.asyncio
async def test_newer_request_supersedes_pending_custom_pass(tmp_path: Path) -> None:
    env = Env(tmp_path)
    env.bundle = GatedBundle(env.resources)
    env.settings.theme = ThemeMode.CUSTOM
    manager = env.create()
    await asyncio.sleep(0)

    env.settings.theme = ThemeMode.DARK
    await asyncio.sleep(0)
    env.bundle.gate.set()
    await manager.wait_idle()

    assert env.context.calls == [("load", env.stylesheet("dark"))]
    assert not env.custom_path.exists()


@pytest.mark.asyncio
async def test_destroy_stops_updates_and_unregisters(env: Env) -> None:
    manager = env.create()
    await manager.wait_idle()
    env.context.calls.clear()

    manager.destroy()
    env.settings.theme = ThemeMode.LIGHT
    env.system.set_prefers_light(True)
    await asyncio.sleep(0)
    await manager.wait_idle()

    assert env.context.calls == []
    assert manager.request_update() is None
    assert env.bundle.registered is False
