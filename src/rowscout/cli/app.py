"""Typer application with global options."""

from __future__ import annotations

import logging
from importlib.metadata import version as pkg_version
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.logging import RichHandler

from rowscout.cli.display import error_console, print_error
from rowscout.config import Settings

app = typer.Typer(
    name="rowscout",
    help="Find the table inside nested JSON results and export it",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)


# Global state
class State:
    settings: Settings = Settings()


state = State()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"rowscout {pkg_version('rowscout')}")
        raise typer.Exit()


def _configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.verbose else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config YAML file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
):
    """rowscout: find the table inside nested JSON results and export it."""
    try:
        state.settings = Settings.load(config_file=config, verbose=verbose or None)
    except (ValidationError, yaml.YAMLError) as exc:
        print_error(f"Invalid configuration: {exc}")
        raise typer.Exit(1)
    _configure_logging(state.settings)
