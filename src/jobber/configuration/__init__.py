"""Configuration loading utilities for jobber."""

from .settings import (
    DEFAULT_CONFIG_PATH,
    Settings,
    load_settings,
    resolve_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "Settings",
    "load_settings",
    "resolve_settings",
    "save_settings",
]
