"""Tests for the JSON settings layer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from project_browser.errors import SettingsLoadError, SettingsValidationError
from project_browser.settings.manager import SettingsManager, default_settings_path
from project_browser.settings.schema import DEFAULT_SETTINGS, merge_with_defaults


def test_settings_manager_roundtrip(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    manager = SettingsManager(path=settings_path)
    manager.load()
    assert settings_path.exists()
    assert manager.page_size == 24
    assert manager.row_height == 168
    assert manager.overscan == 8
    assert manager.network_delay_ms == 150
    assert manager.source_path is None

    changes = []
    manager.settings_changed.connect(lambda key, value: changes.append((key, value)))
    manager.set("list.page_size", 50)

    assert changes == [("list.page_size", 50)]
    stored = json.loads(settings_path.read_text(encoding="utf-8"))
    assert stored["list"]["page_size"] == 50

    reloaded = SettingsManager(path=settings_path)
    reloaded.load()
    assert reloaded.page_size == 50


def test_partial_file_is_merged_with_defaults(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"list": {"overscan": 2}}), encoding="utf-8")

    manager = SettingsManager(path=settings_path)
    manager.load()

    assert manager.overscan == 2
    assert manager.page_size == 24
    assert manager.get("schema") == DEFAULT_SETTINGS["schema"]


def test_invalid_value_is_rejected_and_previous_kept(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()

    with pytest.raises(SettingsValidationError):
        manager.set("list.page_size", 0)

    assert manager.page_size == 24


def test_invalid_file_raises_validation_error(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"data": {"network_delay_ms": -5}}), encoding="utf-8")

    with pytest.raises(SettingsValidationError):
        SettingsManager(path=settings_path).load()


def test_corrupt_file_raises_load_error(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SettingsLoadError):
        SettingsManager(path=settings_path).load()


def test_get_supports_dotted_keys_and_defaults(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    assert manager.get("data.network_delay_ms") == 150
    assert manager.get("data.missing", "fallback") == "fallback"
    assert manager.get("list.page_size.nested") is None


def test_merge_with_defaults_does_not_mutate_defaults() -> None:
    merged = merge_with_defaults({"list": {"page_size": 10}})
    assert merged["list"]["page_size"] == 10
    assert DEFAULT_SETTINGS["list"]["page_size"] == 24


def test_default_path_honours_xdg(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("project_browser.settings.manager.os.name", "posix")
    monkeypatch.setattr("project_browser.settings.manager.sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_settings_path() == tmp_path / "project_browser" / "settings.json"
