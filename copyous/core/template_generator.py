"""Build-time generation of custom-theme templates.

The stylesheet source tree is inlined, stripped of staging blocks and
comments, and rewritten so the four customizable colors become ``${name}``
placeholders that are filled at runtime. Color helper functions are renamed
to their ``st-`` counterparts, which Sass passes through untouched. The result
is compiled with libsass into the CSS template shipped in the resource bundle.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

import sass

from copyous.core import scss
from copyous.core.imports import inline_imports
from copyous.errors import ErrorCode, ThemeError
from copyous.ui.themes.constants import COLOR_VARIABLES, TEMPLATE_RESOURCE
from copyous.ui.themes.loader import parse_template
from copyous.ui.themes.models import ColorScheme, Contrast, Template

logger = logging.getLogger(__name__)

SOURCE_ROOT = Path("resources") / "css"
SOURCE_ENTRY = "stylesheet.scss"
SEARCH_DIRS: tuple[Path, ...] = (SOURCE_ROOT, SOURCE_ROOT / "gnome-shell-sass")

STAGE_SELECTOR = "stage"
STAGED_FUNCTIONS: tuple[str, ...] = ("lighten", "darken", "transparentize", "mix")

_STAGED_FUNCTION_RE = re.compile(
    r"(?<![{_-])(" + "|".join(STAGED_FUNCTIONS) + r")"
)

SASS_OUTPUT_STYLE = "expanded"

# unquote() keeps the token valid Sass and emits it verbatim in the compiled CSS.
_PLACEHOLDER_PROPS: dict[str, str] = {
    f"${variable.name}": f'unquote("{variable.placeholder}")' for variable in COLOR_VARIABLES
}


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Variant and contrast a template is generated for."""

    variant: ColorScheme = ColorScheme.DARK
    contrast: Contrast = Contrast.NORMAL

    @classmethod
    def from_values(cls, variant: str, contrast: str) -> BuildConfig:
        try:
            scheme = ColorScheme.from_nick(variant or "dark")
        except ValueError:
            raise ThemeError(
                ErrorCode.CONFIG_INVALID,
                message=f"VARIANT must be 'dark' or 'light', got {variant!r}",
            ) from None
        try:
            level = Contrast((contrast or "normal").strip().lower())
        except ValueError:
            raise ThemeError(
                ErrorCode.CONFIG_INVALID,
                message=f"CONTRAST must be 'normal' or 'high', got {contrast!r}",
            ) from None
        return cls(variant=scheme, contrast=level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BuildConfig:
        env = os.environ if environ is None else environ
        return cls.from_values(env.get("VARIANT") or "dark", env.get("CONTRAST") or "normal")


def rename_staged_functions(value: str) -> str:
    """Prefix color helpers with ``st-`` unless preceded by ``{``, ``_`` or ``-``."""
    return _STAGED_FUNCTION_RE.sub(r"st-\1", value)


def transform(sheet: scss.Stylesheet, config: BuildConfig) -> scss.Stylesheet:
    """Apply the template rules to an already inlined stylesheet."""
    nodes = scss.prune(
        sheet.nodes,
        lambda node: isinstance(node, scss.Comment)
        or (isinstance(node, scss.Rule) and node.selector == STAGE_SELECTOR),
    )

    for node in scss.walk(nodes):
        if not isinstance(node, scss.Declaration):
            continue
        placeholder = _PLACEHOLDER_PROPS.get(node.prop)
        if placeholder is not None:
            node.value = placeholder
        else:
            node.value = rename_staged_functions(node.value)

    header: list[scss.Node] = [
        scss.Declaration("$contrast", f"'{config.contrast.value}'"),
        scss.Declaration("$variant", f"'{config.variant.nick}'"),
    ]
    return scss.Stylesheet(nodes=header + nodes, source=sheet.source)


def render_source(
    source: Path,
    search_paths: Sequence[Path],
    config: BuildConfig,
) -> str:
    """Read ``source``, inline its imports and return the transformed SCSS."""
    sheet = inline_imports(scss.parse_file(source), search_paths, config.contrast)
    return scss.serialize(transform(sheet, config))


def compile_scss(text: str, source: Path | None = None) -> str:
    """Compile self-contained SCSS text to CSS."""
    try:
        return sass.compile(string=text, output_style=SASS_OUTPUT_STYLE)
    except sass.CompileError as exc:
        raise ThemeError(
            ErrorCode.SCSS_COMPILE_FAILED,
            path=source,
            details={"original": str(exc).strip()},
        ) from exc


def generate_template(
    source: Path,
    search_paths: Sequence[Path],
    config: BuildConfig,
) -> Template:
    """Produce the compiled CSS template for ``config`` from ``source``."""
    css = compile_scss(render_source(source, search_paths, config), source)
    return parse_template(css)


def write_template(template: Template, output_dir: Path, variant: ColorScheme) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / TEMPLATE_RESOURCE.format(scheme=variant.nick)
    path.write_text(template.text, encoding="utf-8")
    logger.info("Wrote %s template to %s", variant.nick, path)
    return path


def build(root: Path, output_dir: Path, config: BuildConfig) -> Path:
    """Generate the template for ``config`` from the source tree under ``root``."""
    search_paths = [root / directory for directory in SEARCH_DIRS]
    template = generate_template(root / SOURCE_ROOT / SOURCE_ENTRY, search_paths, config)
    return write_template(template, output_dir, config.variant)
