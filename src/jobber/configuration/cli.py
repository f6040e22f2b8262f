"""CLI commands for managing jobber settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from jobber.configuration.settings import (
    DEFAULT_CONFIG_PATH,
    Settings,
    bootstrap_settings,
    load_settings,
    save_settings,
)
from jobber.errors import InvalidConfigError


config_app = typer.Typer(help="Manage jobber configuration")


@config_app.command("init")
def init_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config file"),
    resolution: Optional[float] = typer.Option(None, help="Rounding granularity in hours"),
    rate: Optional[float] = typer.Option(None, help="Hourly rate"),
    data_file: Optional[Path] = typer.Option(None, help="Job file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Initialize the jobber settings file."""

    overrides = {
        "resolution": resolution,
        "rate": rate,
        "data_file": str(data_file) if data_file else None,
    }
    try:
        settings = bootstrap_settings(path=config_path, overrides=overrides, force=force)
    except InvalidConfigError as e:
        typer.echo(f"Configuration invalid: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Configuration initialized at {config_path}")
    typer.echo(_summarize_settings(settings))


@config_app.command("show")
def show_config(config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config")) -> None:
    """Display the configuration file."""

    try:
        settings = load_settings(config_path)
    except (FileNotFoundError, InvalidConfigError) as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(_summarize_settings(settings))


@config_app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key, e.g. resolution"),
    value: str = typer.Argument(..., help="New value (use 'none' to clear the rate)"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Update a configuration value."""

    if key not in Settings.model_fields:
        typer.echo(f"Unknown setting: {key}", err=True)
        typer.echo(f"Available settings: {', '.join(Settings.model_fields)}")
        raise typer.Exit(code=1)

    settings = load_settings(config_path) if config_path.exists() else Settings()
    payload = settings.model_dump(mode="python")
    payload[key] = None if value.lower() == "none" else value
    try:
        updated = Settings.model_validate(payload)
    except ValueError as e:
        typer.echo(f"Invalid value for {key}: {e}", err=True)
        raise typer.Exit(code=1)
    save_settings(updated, config_path)
    typer.echo(f"Updated {key}")


@config_app.command("validate")
def validate_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config file"),
) -> None:
    """Validate configuration file for correctness."""

    try:
        settings = load_settings(config_path)
    except (FileNotFoundError, InvalidConfigError) as e:
        typer.echo(f"Configuration invalid: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Configuration valid at {config_path}")
    typer.echo(f"   Job file: {settings.data_file}")
    typer.echo(f"   Resolution: {settings.resolution}")
    typer.echo(f"   Rate: {settings.rate if settings.rate is not None else 'none'}")


def _summarize_settings(settings: Settings) -> str:
    data = settings.model_dump(mode="json")
    return json.dumps(data, indent=2)
