"""Tests for stylesheet import resolution and inlining."""

from __future__ import annotations

from pathlib import Path

import pytest

from copyous.core import scss
from copyous.core.imports import (
    import_candidates,
    inline_imports,
    resolve_import,
    split_import_params,
)
from copyous.errors import ErrorCode, ThemeError
from copyous.ui.themes.models import Contrast


def _write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_candidates_try_plain_then_partial() -> None:
    assert import_candidates("colors") == ["colors.scss", "_colors.scss"]
    assert import_candidates("_colors") == ["_colors.scss"]


def test_candidates_keep_explicit_names_literal() -> None:
    assert import_candidates("theme.css") == ["theme.css"]
    assert import_candidates("widgets.base") == ["widgets.base"]


def test_candidates_redirect_colors_under_high_contrast() -> None:
    assert import_candidates("colors", Contrast.HIGH) == [
        "high-contrast-colors.scss",
        "_high-contrast-colors.scss",
    ]
    assert import_candidates("_colors", Contrast.HIGH) == ["_high-contrast-colors.scss"]
    assert import_candidates("drawing", Contrast.HIGH) == ["drawing.scss", "_drawing.scss"]


def test_resolve_searches_directories_before_candidates(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    partial = _write(first / "_x.scss")
    _write(second / "x.scss")

    assert resolve_import("x", [first, second]) == partial


def test_resolve_prefers_plain_name_within_a_directory(tmp_path: Path) -> None:
    plain = _write(tmp_path / "x.scss")
    _write(tmp_path / "_x.scss")

    assert resolve_import("x", [tmp_path]) == plain


def test_resolve_high_contrast_uses_high_contrast_source(tmp_path: Path) -> None:
    _write(tmp_path / "_colors.scss")
    high = _write(tmp_path / "_high-contrast-colors.scss")

    assert resolve_import("colors", [tmp_path], Contrast.HIGH) == high


def test_resolve_high_contrast_fails_without_high_contrast_source(tmp_path: Path) -> None:
    _write(tmp_path / "_colors.scss")

    with pytest.raises(ThemeError) as exc_info:
        resolve_import("colors", [tmp_path], Contrast.HIGH)

    assert exc_info.value.code is ErrorCode.IMPORT_NOT_FOUND
    assert "_high-contrast-colors.scss" in exc_info.value.details["candidates"]


def test_split_import_params_handles_quotes_and_lists() -> None:
    assert split_import_params("'colors', \"drawing\"") == ["colors", "drawing"]
    assert split_import_params("'a,b'") == ["a,b"]


def test_inline_imports_expands_nested_imports_once(tmp_path: Path) -> None:
    _write(tmp_path / "_colors.scss", "$bg_color: #000;\n")
    _write(tmp_path / "_drawing.scss", "@import 'colors';\n@mixin card { color: $bg_color; }\n")
    entry = _write(
        tmp_path / "stylesheet.scss",
        "@import 'colors', 'drawing';\n.a { @import 'colors'; color: red; }\n",
    )

    sheet = inline_imports(scss.parse_file(entry), [tmp_path])
    text = scss.serialize(sheet)

    assert text.count("$bg_color: #000;") == 1
    assert "@import" not in text
    assert text.index("$bg_color") < text.index("@mixin card")


def test_inline_imports_keeps_remote_imports(tmp_path: Path) -> None:
    entry = _write(tmp_path / "stylesheet.scss", "@import url(theme.css);\n.a { color: red; }\n")

    sheet = inline_imports(scss.parse_file(entry), [tmp_path])

    assert sheet.nodes[0] == scss.AtRule("import", "url(theme.css)", None, line=1)


def test_inline_imports_reports_unresolved_import(tmp_path: Path) -> None:
    entry = _write(tmp_path / "stylesheet.scss", "@import 'missing';\n")

    with pytest.raises(ThemeError) as exc_info:
        inline_imports(scss.parse_file(entry), [tmp_path])

    assert exc_info.value.code is ErrorCode.IMPORT_NOT_FOUND
