"""Persistent crop settings."""

from .manager import SettingsManager, crop_options_from_settings, default_settings_path
from .schema import DEFAULT_SETTINGS, SETTINGS_SCHEMA, merge_with_defaults, validate_settings

__all__ = [
    "DEFAULT_SETTINGS",
    "SETTINGS_SCHEMA",
    "SettingsManager",
    "crop_options_from_settings",
    "default_settings_path",
    "merge_with_defaults",
    "validate_settings",
]
