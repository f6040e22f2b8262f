"""Typed settings for jobber.

User configuration is wrapped in a Pydantic model so the CLI can hand one
validated value to the ledger, the reports and the presentation layer
instead of consulting global state.

Precedence, lowest first: defaults, config file, environment
(``JOBBER_RESOLUTION``, ``JOBBER_RATE``, ``JOBBER_FILE``), command line.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from jobber.errors import InvalidConfigError
from jobber.ledger.models import DEFAULT_RESOLUTION


DEFAULT_CONFIG_PATH = Path.home() / ".jobber" / "config.json"
DEFAULT_DATA_FILE = Path("jobber.dat")


class Settings(BaseModel):
    """Root configuration state."""

    resolution: float = Field(
        DEFAULT_RESOLUTION, gt=0, le=24, description="Rounding granularity in hours"
    )
    rate: Optional[float] = Field(
        default=None, ge=0, description="Hourly rate; enables cost figures"
    )
    data_file: Path = Field(DEFAULT_DATA_FILE, description="Job file")
    lock_timeout: float = Field(10, gt=0, description="Seconds to wait for the job file lock")


def load_settings(path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from disk or raise if invalid."""

    if not path.exists():
        raise FileNotFoundError(f"Settings file not found at {path}")
    try:
        payload = json.loads(path.read_text())
        return Settings.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise InvalidConfigError(f"Invalid configuration in {path}: {exc}") from exc


def save_settings(settings: Settings, path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Persist settings to disk."""

    payload = settings.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))


def resolve_settings(
    *,
    path: Path = DEFAULT_CONFIG_PATH,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Combine config file, environment and explicit overrides.

    Unlike :func:`bootstrap_settings` nothing is written to disk.
    """

    settings = load_settings(path) if path.exists() else Settings()
    merged = settings.model_dump(mode="python")
    merged = _apply_env_overrides(merged)
    merged = _apply_overrides(merged, overrides or {})
    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc


def bootstrap_settings(
    *,
    path: Path = DEFAULT_CONFIG_PATH,
    overrides: Optional[Dict[str, Any]] = None,
    force: bool = False,
) -> Settings:
    """Create (or recreate with ``force``) the settings file."""

    if path.exists() and not force:
        settings = load_settings(path)
    else:
        settings = Settings()
    merged = _apply_overrides(settings.model_dump(mode="python"), overrides or {})
    try:
        resolved = Settings.model_validate(merged)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc
    save_settings(resolved, path)
    return resolved


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = base.copy()
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    _set_env_override(data, "resolution", "JOBBER_RESOLUTION", cast_float=True)
    _set_env_override(data, "rate", "JOBBER_RATE", cast_float=True)
    _set_env_override(data, "data_file", "JOBBER_FILE")
    return data


def _set_env_override(
    mapping: Dict[str, Any],
    key: str,
    env_name: str,
    *,
    cast_float: bool = False,
) -> None:
    raw = os.getenv(env_name)
    if raw is None or raw == "":
        return
    if cast_float:
        try:
            mapping[key] = float(raw)
        except ValueError as exc:
            raise InvalidConfigError(f"{env_name} must be a number, got {raw!r}") from exc
    else:
        mapping[key] = raw
