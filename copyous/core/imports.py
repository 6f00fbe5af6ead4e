"""Stylesheet import resolution and inlining."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Sequence

from copyous.core import scss
from copyous.errors import ErrorCode, ThemeError
from copyous.ui.themes.models import Contrast

logger = logging.getLogger(__name__)

SOURCE_EXTENSION = ".scss"
COLORS_SOURCE = "colors"
HIGH_CONTRAST_COLORS_SOURCE = "high-contrast-colors"

# A dot with something on both sides means the name already carries an extension.
_EXPLICIT_NAME_RE = re.compile(r".\..")
_REMOTE_IMPORT_RE = re.compile(r"^(?:url\(|[a-z][a-z0-9+.-]*://)", re.IGNORECASE)


def import_candidates(name: str, contrast: Contrast = Contrast.NORMAL) -> list[str]:
    """Return the file names tried for an import, in order."""
    if contrast is Contrast.HIGH and name.lstrip("_") == COLORS_SOURCE:
        prefix = "_" if name.startswith("_") else ""
        name = prefix + HIGH_CONTRAST_COLORS_SOURCE

    if _EXPLICIT_NAME_RE.search(name):
        return [name]
    candidates = [f"{name}{SOURCE_EXTENSION}"]
    if not name.startswith("_"):
        candidates.append(f"_{name}{SOURCE_EXTENSION}")
    return candidates


def resolve_import(
    name: str,
    search_paths: Sequence[Path],
    contrast: Contrast = Contrast.NORMAL,
) -> Path:
    """Find the file an import refers to.

    Directories are searched in order and, within each, candidates in order;
    the first existing file wins.
    """
    candidates = import_candidates(name, contrast)
    for directory in search_paths:
        for candidate in candidates:
            path = directory / candidate
            if path.is_file():
                return path
    raise ThemeError(
        ErrorCode.IMPORT_NOT_FOUND,
        message=f"Unable to resolve import {name!r}",
        details={
            "candidates": ", ".join(candidates),
            "search_paths": ", ".join(str(path) for path in search_paths),
        },
    )


def split_import_params(params: str) -> list[str]:
    """Split ``'a', "b"`` into bare import names."""
    names: list[str] = []
    for part in _split_top_level(params):
        cleaned = part.strip()
        if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
            cleaned = cleaned[1:-1]
        if cleaned:
            names.append(cleaned)
    return names


def inline_imports(
    sheet: scss.Stylesheet,
    search_paths: Sequence[Path],
    contrast: Contrast = Contrast.NORMAL,
) -> scss.Stylesheet:
    """Replace local ``@import`` rules with the parsed content they refer to.

    Each file is inlined at most once. ``url(...)`` and remote imports are kept.
    """
    seen: set[Path] = set()
    if sheet.source is not None:
        seen.add(sheet.source.resolve())
    nodes = _inline(sheet.nodes, search_paths, contrast, seen)
    return scss.Stylesheet(nodes=nodes, source=sheet.source)


def _inline(
    nodes: Iterable[scss.Node],
    search_paths: Sequence[Path],
    contrast: Contrast,
    seen: set[Path],
) -> list[scss.Node]:
    result: list[scss.Node] = []
    for node in nodes:
        if isinstance(node, scss.AtRule) and node.name == "import" and node.nodes is None:
            if _REMOTE_IMPORT_RE.match(node.params.strip().strip("\"'")):
                result.append(node)
                continue
            for name in split_import_params(node.params):
                path = resolve_import(name, search_paths, contrast)
                key = path.resolve()
                if key in seen:
                    logger.debug("Skipping duplicate import %s", path)
                    continue
                seen.add(key)
                imported = scss.parse_file(path)
                result.extend(_inline(imported.nodes, search_paths, contrast, seen))
            continue
        if isinstance(node, scss.Rule):
            node.nodes = _inline(node.nodes, search_paths, contrast, seen)
        elif isinstance(node, scss.AtRule) and node.nodes is not None:
            node.nodes = _inline(node.nodes, search_paths, contrast, seen)
        result.append(node)
    return result


def _split_top_level(params: str) -> list[str]:
    parts: list[str] = []
    quote = ""
    depth = 0
    current: list[str] = []
    for char in params:
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts
