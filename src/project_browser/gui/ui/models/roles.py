"""Role definitions for the project list model."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from PySide6.QtCore import Qt


class Roles(IntEnum):
    """Custom roles exposed to QML or widgets."""

    PROJECT_ID = Qt.UserRole + 1
    NAME = Qt.UserRole + 2
    SUMMARY = Qt.UserRole + 3
    STATUS = Qt.UserRole + 4
    CATEGORY = Qt.UserRole + 5
    OWNER = Qt.UserRole + 6
    TAGS = Qt.UserRole + 7
    UPDATED_AT = Qt.UserRole + 8
    IS_SENTINEL = Qt.UserRole + 9
    SENTINEL_TEXT = Qt.UserRole + 10


def role_names(base: Dict[int, bytes] | None = None) -> Dict[int, bytes]:
    """Return a mapping of Qt role numbers to byte names."""

    mapping: Dict[int, bytes] = {} if base is None else dict(base)
    mapping.update(
        {
            Roles.PROJECT_ID: b"projectId",
            Roles.NAME: b"name",
            Roles.SUMMARY: b"summary",
            Roles.STATUS: b"status",
            Roles.CATEGORY: b"category",
            Roles.OWNER: b"owner",
            Roles.TAGS: b"tags",
            Roles.UPDATED_AT: b"updatedAt",
            Roles.IS_SENTINEL: b"isSentinel",
            Roles.SENTINEL_TEXT: b"sentinelText",
        }
    )
    return mapping
