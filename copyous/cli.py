"""Command line entry points for the theme build and preferences window."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from copyous.core.template_generator import BuildConfig, build
from copyous.errors import ThemeError, format_error_for_user

app = typer.Typer(help="Copyous theme tooling.", no_args_is_help=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("generate-template")
def generate_template_command(
    variant: str = typer.Option("dark", "--variant", envvar="VARIANT", help="dark or light"),
    contrast: str = typer.Option("normal", "--contrast", envvar="CONTRAST", help="normal or high"),
    root: Path = typer.Option(Path("."), "--root", help="Directory containing resources/css."),
    output: Path = typer.Option(
        Path("build") / "theme", "--output", "-o", help="Directory for the template file."
    ),
) -> None:
    """Generate the custom-theme template for one variant."""
    try:
        config = BuildConfig.from_values(variant, contrast)
        path = build(root, output, config)
    except ThemeError as exc:
        typer.echo(format_error_for_user(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Wrote {path}")


@app.command("preferences")
def preferences_command() -> None:
    """Open the theme preferences window with live styling."""
    from copyous.app import run_app

    raise typer.Exit(code=run_app())
