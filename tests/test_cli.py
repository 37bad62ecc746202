"""Tests for the Typer command line front end."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from project_browser.application.services.query_executor import QueryExecutor
from project_browser.cli import app

runner = CliRunner()


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.json"


def _invoke(settings_path: Path, *args: str):
    return runner.invoke(app, ["--settings", str(settings_path), *args])


def test_list_default_page(settings_path):
    result = _invoke(settings_path, "list", "--delay-ms", "0")
    assert result.exit_code == 0, result.output
    assert "Showing 24 of 200 projects." in result.output


def test_list_search_and_pages(settings_path):
    result = _invoke(settings_path, "list", "--delay-ms", "0", "--search", "Project 1", "--pages", "2")
    assert result.exit_code == 0, result.output
    assert "Filtered 48 of 111 projects." in result.output


def test_list_tag_filters(settings_path):
    result = _invoke(
        settings_path, "list", "--delay-ms", "0", "--tag", "priority", "--tag", "launch"
    )
    assert result.exit_code == 0, result.output
    assert "No projects available." in result.output


def test_list_zero_matches(settings_path):
    result = _invoke(settings_path, "list", "--delay-ms", "0", "--search", "zzz")
    assert result.exit_code == 0, result.output
    assert "No projects match" in result.output


def test_list_keeps_loaded_pages_when_append_fails(settings_path, monkeypatch):
    execute = QueryExecutor.execute

    async def fetch(self, page, page_size, search, filters):
        if page > 0:
            raise ConnectionError("offline")
        return await execute(self, page, page_size, search, filters)

    monkeypatch.setattr(QueryExecutor, "fetch", fetch)
    result = _invoke(settings_path, "list", "--delay-ms", "0", "--pages", "2")
    assert result.exit_code == 0, result.output
    assert "Showing 24 of 200 projects." in result.output
    assert "Warning: Failed to fetch page 1" in result.output


def test_list_fails_when_first_page_fails(settings_path, monkeypatch):
    async def fetch(self, page, page_size, search, filters):
        raise ConnectionError("offline")

    monkeypatch.setattr(QueryExecutor, "fetch", fetch)
    result = _invoke(settings_path, "list", "--delay-ms", "0")
    assert result.exit_code == 1
    assert "Failed to fetch page 0" in result.output


def test_list_rejects_unknown_status(settings_path):
    result = _invoke(settings_path, "list", "--status", "archived")
    assert result.exit_code == 1
    assert "Unknown project status" in result.output


def test_show_project(settings_path):
    result = _invoke(settings_path, "show", "7")
    assert result.exit_code == 0, result.output
    assert "Project 7" in result.output
    assert "Status:   paused" in result.output


def test_show_missing_project(settings_path):
    result = _invoke(settings_path, "show", "999")
    assert result.exit_code == 1
    assert "Project not found" in result.output


def test_window_reports_sentinel(settings_path):
    result = _invoke(settings_path, "window", "--delay-ms", "0", "--scroll", "3000")
    assert result.exit_code == 0, result.output
    assert "Rows 9-24 of 25" in result.output
    assert "Sentinel visible" in result.output


def test_settings_set_and_show(settings_path):
    result = _invoke(settings_path, "settings", "set", "list.page_size", "10")
    assert result.exit_code == 0, result.output
    assert json.loads(settings_path.read_text(encoding="utf-8"))["list"]["page_size"] == 10

    listed = _invoke(settings_path, "list", "--delay-ms", "0")
    assert "Showing 10 of 200 projects." in listed.output


def test_settings_set_invalid_value(settings_path):
    result = _invoke(settings_path, "settings", "set", "list.page_size", "0")
    assert result.exit_code == 1
    assert "Error" in result.output
