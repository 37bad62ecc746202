"""Qt list model exposing :class:`ProjectListViewModel` to item views."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from PySide6.QtCore import QAbstractListModel, QModelIndex, Qt

from project_browser.config import SENTINEL_END_TEXT, SENTINEL_LOADING_TEXT
from project_browser.domain.models import Project
from project_browser.gui.viewmodels.project_list_viewmodel import (
    ListSnapshot,
    ProjectListViewModel,
)

from .roles import Roles, role_names

logger = logging.getLogger(__name__)


class ProjectListModel(QAbstractListModel):
    """Expose loaded projects plus a trailing sentinel row to Qt views.

    The model keeps its own copy of the rows so Qt always sees counts that
    match the begin/end notifications it received, even while the view-model
    moves on.
    """

    def __init__(self, viewmodel: ProjectListViewModel, parent=None) -> None:  # type: ignore[override]
        super().__init__(parent)
        self._viewmodel = viewmodel
        self._rows: Tuple[Project, ...] = ()
        self._has_more = False
        self._apply_snapshot()
        viewmodel.state_changed.connect(self._apply_snapshot)

    # ------------------------------------------------------------------
    # Qt model API
    # ------------------------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = None) -> int:  # type: ignore[override]
        if parent is not None and parent.isValid():  # pragma: no cover - tree fallback
            return 0
        return len(self._rows) + (1 if self._has_more else 0)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < self.rowCount()):
            return None
        row = index.row()
        if row >= len(self._rows):
            return self._sentinel_data(role)
        return self._project_data(self._rows[row], role)

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return role_names(super().roleNames())

    # ------------------------------------------------------------------
    # Pagination support (Qt canFetchMore/fetchMore API)
    # ------------------------------------------------------------------
    def canFetchMore(self, parent: QModelIndex = QModelIndex()) -> bool:
        if parent.isValid():
            return False
        snapshot = self._viewmodel.snapshot()
        return snapshot.has_more and not (snapshot.is_loading or snapshot.is_stale)

    def fetchMore(self, parent: QModelIndex = QModelIndex()) -> None:
        if parent.isValid():
            return
        self._viewmodel.load_more()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def project_at(self, row: int) -> Optional[Project]:
        if 0 <= row < len(self._rows):
            return self._rows[row]
        return None

    def sentinel_text(self) -> str:
        return SENTINEL_LOADING_TEXT if self._has_more else SENTINEL_END_TEXT

    def _project_data(self, project: Project, role: int):
        if role in (Qt.DisplayRole, Roles.NAME):
            return project.name
        if role == Qt.ToolTipRole or role == Roles.SUMMARY:
            return project.summary
        if role == Roles.PROJECT_ID:
            return project.id
        if role == Roles.STATUS:
            return project.status.value
        if role == Roles.CATEGORY:
            return project.category
        if role == Roles.OWNER:
            return project.owner
        if role == Roles.TAGS:
            return list(project.tags)
        if role == Roles.UPDATED_AT:
            return project.updated_at
        if role == Roles.IS_SENTINEL:
            return False
        return None

    def _sentinel_data(self, role: int):
        if role == Roles.IS_SENTINEL:
            return True
        if role in (Qt.DisplayRole, Roles.SENTINEL_TEXT):
            return self.sentinel_text()
        return None

    def _apply_snapshot(self, _snapshot: Optional[ListSnapshot] = None) -> None:
        # Read the freshest state; nested notifications may deliver an older
        # snapshot after a newer one.
        snapshot = self._viewmodel.snapshot()
        old_rows, new_rows = self._rows, snapshot.items
        old_len, new_len = len(old_rows), len(new_rows)
        is_append = (
            new_len > old_len
            and all(a is b for a, b in zip(old_rows, new_rows[:old_len]))
        )

        if old_rows == new_rows:
            self._update_sentinel(snapshot.has_more)
        elif is_append:
            self.beginInsertRows(QModelIndex(), old_len, new_len - 1)
            self._rows = new_rows
            self.endInsertRows()
            self._update_sentinel(snapshot.has_more)
        else:
            logger.debug("Resetting project list model (%d -> %d rows)", old_len, new_len)
            self.beginResetModel()
            self._rows = new_rows
            self._has_more = snapshot.has_more
            self.endResetModel()

    def _update_sentinel(self, has_more: bool) -> None:
        if has_more == self._has_more:
            return
        row = len(self._rows)
        if has_more:
            self.beginInsertRows(QModelIndex(), row, row)
            self._has_more = True
            self.endInsertRows()
        else:
            self.beginRemoveRows(QModelIndex(), row, row)
            self._has_more = False
            self.endRemoveRows()
