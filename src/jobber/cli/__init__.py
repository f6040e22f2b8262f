"""Command line entry points for jobber."""

from typer import Typer

from ..configuration.cli import config_app
from .main import TIME_HELP, main


cli = Typer(help="jobber - job time tracker", epilog=TIME_HELP, add_completion=False)
cli.callback(invoke_without_command=True)(main)
cli.add_typer(config_app, name="config")

__all__ = ["cli", "config_app", "main"]
