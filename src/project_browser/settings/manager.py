"""Settings file management with validation and change notifications."""

from __future__ import annotations

import logging
import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError

from ..errors import DataLoadError, SettingsLoadError, SettingsValidationError
from ..gui.viewmodels.signal import Signal
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults

LOGGER = logging.getLogger(__name__)


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "project_browser" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "project_browser" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "project_browser" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "project_browser" / "settings.json"
    return Path.home() / ".config" / "project_browser" / "settings.json"


class SettingsManager:
    """Load, validate and persist list settings.

    Only list configuration lives here; filter selections are never
    persisted.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)
        self.settings_changed = Signal()  # emits (key, value)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk, creating defaults if missing."""

        path = self.path
        self._path = path
        if path.exists():
            try:
                payload = read_json(path)
            except DataLoadError as exc:
                raise SettingsLoadError(str(exc)) from exc
            if not isinstance(payload, dict):
                raise SettingsLoadError(f"Settings file {path} must contain an object")
        else:
            payload = None
        try:
            self._data = merge_with_defaults(payload)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        LOGGER.debug("Loaded settings from %s", path)
        self._write()

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target: Any = self._data
        for part in key.split("."):
            if not isinstance(target, dict) or part not in target:
                return default
            target = target[part]
        return target

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value*, validate and persist the change.

        The previous settings are kept when validation fails.
        """

        if isinstance(value, Path):
            value = str(value)
        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = value
        try:
            self._data = merge_with_defaults(candidate)
        except ValidationError as exc:
            raise SettingsValidationError(f"{key}: {exc.message}") from exc
        self._write()
        self.settings_changed.emit(key, value)

    def as_dict(self) -> dict[str, Any]:
        return deepcopy(self._data)

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------
    @property
    def page_size(self) -> int:
        return int(self.get("list.page_size"))

    @property
    def row_height(self) -> float:
        return self.get("list.row_height")

    @property
    def overscan(self) -> int:
        return int(self.get("list.overscan"))

    @property
    def network_delay_ms(self) -> int:
        return int(self.get("data.network_delay_ms"))

    @property
    def query_cache_size(self) -> int:
        return int(self.get("data.query_cache_size", 0))

    @property
    def source_path(self) -> Path | None:
        value = self.get("data.source_path")
        return Path(value) if value else None

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        write_json(self.path, self._data)


__all__ = ["SettingsManager", "default_settings_path"]
