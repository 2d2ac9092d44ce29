"""Command-line interface for rsoutline."""

from __future__ import annotations

import importlib.metadata
import logging
import sys
from pathlib import Path

import typer
from click.core import ParameterSource

from rsoutline.config import OutlineConfig, TypeStyle, load_config
from rsoutline.errors import ConfigError, GrammarError, OutlineError
from rsoutline.parser import RustParser
from rsoutline.renderer import write_outline

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Print an indented outline of the declarations in a Rust source file.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(importlib.metadata.version("rsoutline"))
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _print_error(exc: OutlineError) -> None:
    typer.echo(f"{exc.code}: {exc}", err=True)


def _exit_code(exc: OutlineError, config: OutlineConfig) -> int:
    """Exit status for a failed run.

    Setup problems (config, grammar) always fail; input failures exit 0
    when the legacy behaviour is requested.
    """
    if isinstance(exc, (ConfigError, GrammarError)):
        return exc.exit_code
    if config.cli.exit_zero_on_error:
        return 0
    return exc.exit_code


def _from_command_line(ctx: typer.Context, name: str, value: bool | None) -> bool | None:
    """Return ``value`` only when the flag was given, so config values survive."""
    if ctx.get_parameter_source(name) is ParameterSource.COMMANDLINE:
        return value
    return None


@app.command()
def outline(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Rust source file to outline."),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        dir_okay=False,
        help="Path to rsoutline.yaml (default: search upwards from the working directory).",
    ),
    type_style: TypeStyle | None = typer.Option(
        None,
        "--type-style",
        case_sensitive=False,
        help="How type expressions are printed.",
    ),
    allow_partial: bool | None = typer.Option(
        None,
        "--allow-partial/--strict",
        help="Outline files with syntax errors instead of failing (default: from config).",
    ),
    exit_zero: bool | None = typer.Option(
        None,
        "--exit-zero/--no-exit-zero",
        help="Exit with status 0 even when the file cannot be read or parsed (default: from config).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    version: bool = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    """Outline the top-level declarations of PATH."""
    _configure_logging(verbose)

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        _print_error(exc)
        raise typer.Exit(code=exc.exit_code) from exc

    config = config.with_overrides(
        type_style=type_style,
        allow_partial=_from_command_line(ctx, "allow_partial", allow_partial),
        exit_zero_on_error=_from_command_line(ctx, "exit_zero", exit_zero),
    )

    try:
        parser = RustParser(config.parser, max_nesting=config.render.max_nesting)
        declarations = parser.parse_file(path)
        count = write_outline(declarations, sys.stdout, config=config.render)
    except OutlineError as exc:
        _print_error(exc)
        raise typer.Exit(code=_exit_code(exc, config)) from exc

    logger.debug("Wrote %d lines for %d top-level items", count, len(declarations))


def main() -> None:
    app()


__all__ = ["app", "main"]
