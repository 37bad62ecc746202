"""Schema helpers for the project browser settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_PAGE_SIZE,
    ESTIMATED_ROW_HEIGHT,
    NETWORK_DELAY_MS,
    OVERSCAN_ROWS,
    QUERY_CACHE_SIZE,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "project_browser/settings.schema.json",
    "type": "object",
    "required": ["schema", "list", "data"],
    "properties": {
        "schema": {"const": "project_browser/settings@1"},
        "list": {
            "type": "object",
            "required": ["page_size", "row_height", "overscan"],
            "properties": {
                "page_size": {"type": "integer", "minimum": 1, "maximum": 500},
                "row_height": {"type": "number", "exclusiveMinimum": 0},
                "overscan": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": True,
        },
        "data": {
            "type": "object",
            "required": ["network_delay_ms"],
            "properties": {
                "network_delay_ms": {"type": "integer", "minimum": 0},
                "query_cache_size": {"type": "integer", "minimum": 0},
                "source_path": {"type": ["string", "null"]},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "project_browser/settings@1",
    "list": {
        "page_size": DEFAULT_PAGE_SIZE,
        "row_height": ESTIMATED_ROW_HEIGHT,
        "overscan": OVERSCAN_ROWS,
    },
    "data": {
        "network_delay_ms": NETWORK_DELAY_MS,
        "query_cache_size": QUERY_CACHE_SIZE,
        "source_path": None,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

_SECTIONS = ("list", "data")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _SECTIONS and isinstance(value, dict):
                merged.setdefault(key, {}).update(value)
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
