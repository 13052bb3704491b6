"""CLI interface for Sitestage.

Command-line tool for building and previewing static sites.
"""

import logging
import sys
from pathlib import Path

import click
from jinja2 import TemplateError

from sitestage import __version__
from sitestage.builder import BuildContext, Builder, BuildResult
from sitestage.config import Config
from sitestage.exceptions import SitestageError


class EchoObserver:
    """Prints build phases as they run."""

    def on_before_phase(self, phase: str, context: BuildContext) -> None:
        click.echo(f"  {phase.replace('_', ' ')}...")

    def on_after_phase(self, phase: str, context: BuildContext) -> None:
        pass


@click.group()
@click.version_option(__version__, prog_name="sitestage")
def cli() -> None:
    """Sitestage - Compile content and layouts into a static site."""


def _build_options(func):  # type: ignore[no-untyped-def]
    """Options shared by commands that build a site."""
    options = [
        click.argument(
            "source_dir",
            type=click.Path(exists=True, file_okay=False, path_type=Path),
            default=".",
        ),
        click.option(
            "--dest",
            "-d",
            "dest_dir",
            type=click.Path(exists=True, file_okay=False, path_type=Path),
            default=None,
            help="Destination directory (default: source directory)",
        ),
        click.option(
            "--config",
            "-c",
            "config_path",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="Path to configuration file (default: auto-discover sitestage.toml)",
        ),
        click.option(
            "--output-dir",
            "-o",
            default=None,
            help="Output directory name inside the destination (overrides config)",
        ),
        click.option(
            "--theme",
            "-t",
            default=None,
            help="Theme name (overrides config)",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            help="Enable verbose output",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.command()
@_build_options
def build(
    source_dir: Path,
    dest_dir: Path | None,
    config_path: Path | None,
    output_dir: str | None,
    theme: str | None,
    verbose: bool,
) -> None:
    """Build the site in SOURCE_DIR."""
    _setup_logging(verbose)
    result = _run_build(source_dir, dest_dir, config_path, output_dir, theme, verbose)
    click.echo(
        click.style(f"\nBuilt {len(result.written)} pages.", fg="green", bold=True),
    )


@cli.command()
@_build_options
@click.option(
    "--host",
    default="127.0.0.1",
    help="Host to bind to (default: 127.0.0.1)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=8000,
    help="Port to bind to (default: 8000)",
)
@click.option(
    "--build/--no-build",
    "build_first",
    default=True,
    help="Build the site before serving (default: enabled)",
)
def serve(
    source_dir: Path,
    dest_dir: Path | None,
    config_path: Path | None,
    output_dir: str | None,
    theme: str | None,
    verbose: bool,
    host: str,
    port: int,
    build_first: bool,
) -> None:
    """Build the site in SOURCE_DIR and serve it locally."""
    from sitestage.server import run_server

    _setup_logging(verbose)
    config = _load_config(source_dir, config_path, output_dir, theme)
    if build_first:
        _run_build(source_dir, dest_dir, config_path, output_dir, theme, verbose)

    site_dir = (dest_dir or source_dir) / config.output.dir
    if not site_dir.is_dir():
        click.echo(click.style(f"Error: {site_dir} does not exist, build first", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Serving {site_dir} on http://{host}:{port}/")
    run_server(site_dir, host=host, port=port, index_filename=config.output.filename)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(
    source_dir: Path,
    config_path: Path | None,
    output_dir: str | None,
    theme: str | None,
) -> Config:
    """Load configuration and apply CLI overrides, exiting on errors."""
    try:
        config = Config.load(config_path, start_dir=source_dir)
    except (ValueError, FileNotFoundError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)
    return config.with_overrides(output_dir=output_dir, theme=theme)


def _run_build(
    source_dir: Path,
    dest_dir: Path | None,
    config_path: Path | None,
    output_dir: str | None,
    theme: str | None,
    verbose: bool,
) -> BuildResult:
    """Build the site, printing a red error and exiting 1 on failure."""
    config = _load_config(source_dir, config_path, output_dir, theme)
    click.echo(f"Building {source_dir}")
    try:
        context = BuildContext.create(source_dir, dest_dir, config)
        observers = [EchoObserver()] if verbose else []
        return Builder(context, observers=observers).build()
    except (SitestageError, TemplateError, ValueError, OSError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
