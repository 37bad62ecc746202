"""Application settings package."""

from .manager import SettingsManager, default_settings_path
from .schema import DEFAULT_SETTINGS, SETTINGS_SCHEMA, merge_with_defaults, validate_settings

__all__ = [
    "DEFAULT_SETTINGS",
    "SETTINGS_SCHEMA",
    "SettingsManager",
    "default_settings_path",
    "merge_with_defaults",
    "validate_settings",
]
