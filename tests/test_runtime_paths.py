from __future__ import annotations

from pathlib import Path

from copyous import runtime_paths


def test_source_package_root_points_to_repo_package() -> None:
    root = runtime_paths.package_root()
    assert root.name == "copyous"
    assert (root / "ui").exists()


def test_source_theme_resources_resolve_to_directory() -> None:
    root = runtime_paths.theme_resources_root()
    assert root.name == "theme"
    assert runtime_paths.theme_resource_source() == root


def test_compiled_resource_file_is_preferred(tmp_path: Path, monkeypatch) -> None:
    theme_root = tmp_path / "resources" / "theme"
    theme_root.mkdir(parents=True)
    (theme_root / runtime_paths.THEME_RESOURCE_FILE).write_bytes(b"")
    monkeypatch.setattr(runtime_paths, "package_root", lambda: tmp_path)

    assert runtime_paths.theme_resource_source() == theme_root / "theme.rcc"


def test_frozen_prefers_meipass_copyous_dir(tmp_path: Path, monkeypatch) -> None:
    bundle_root = tmp_path / "bundle"
    package_root = bundle_root / "copyous"
    package_root.mkdir(parents=True)
    monkeypatch.setattr(runtime_paths.sys, "frozen", True, raising=False)
    monkeypatch.setattr(runtime_paths.sys, "_MEIPASS", str(bundle_root), raising=False)

    assert runtime_paths.package_root() == package_root


def test_frozen_falls_back_to_meipass_when_copyous_missing(tmp_path: Path, monkeypatch) -> None:
    bundle_root = tmp_path / "bundle"
    bundle_root.mkdir(parents=True)
    monkeypatch.setattr(runtime_paths.sys, "frozen", True, raising=False)
    monkeypatch.setattr(runtime_paths.sys, "_MEIPASS", str(bundle_root), raising=False)

    assert runtime_paths.package_root() == bundle_root


def test_user_data_root_honors_xdg(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert runtime_paths.user_data_root() == tmp_path / "copyous"

    monkeypatch.delenv("XDG_DATA_HOME")
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    assert runtime_paths.user_data_root() == tmp_path / "home" / ".local" / "share" / "copyous"
