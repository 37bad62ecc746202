"""Tests for the Qt list model adapter over ProjectListViewModel."""

from __future__ import annotations

import asyncio
import os

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for model tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtCore", reason="QtCore not available", exc_type=ImportError)

from PySide6.QtCore import QCoreApplication, Qt

from project_browser.config import SENTINEL_LOADING_TEXT
from project_browser.domain.models import ProjectQuery
from project_browser.gui.ui.models.project_list_model import ProjectListModel
from project_browser.gui.ui.models.roles import Roles
from project_browser.gui.viewmodels.project_list_viewmodel import ProjectListViewModel


@pytest.fixture(scope="module")
def qapp() -> QCoreApplication:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def _make_model(executor, page_size: int = 24):
    vm = ProjectListViewModel(executor, query=ProjectQuery(page_size=page_size))
    model = ProjectListModel(vm)
    events = []
    model.rowsInserted.connect(lambda _parent, first, last: events.append(("insert", first, last)))
    model.rowsRemoved.connect(lambda _parent, first, last: events.append(("remove", first, last)))
    model.modelReset.connect(lambda: events.append(("reset",)))
    return vm, model, events


def test_first_page_and_sentinel(qapp, executor):
    vm, model, _events = _make_model(executor)

    async def scenario():
        await vm.start()

    asyncio.run(scenario())

    assert model.rowCount() == 25
    first = model.index(0, 0)
    assert model.data(first, Roles.NAME) == "Project 1"
    assert model.data(first, Qt.DisplayRole) == "Project 1"
    assert model.data(first, Roles.PROJECT_ID) == "1"
    assert model.data(first, Roles.STATUS) == "active"
    assert model.data(first, Roles.TAGS) == ["priority", "design", "growth"]
    assert model.data(first, Roles.IS_SENTINEL) is False
    sentinel = model.index(24, 0)
    assert model.data(sentinel, Roles.IS_SENTINEL) is True
    assert model.data(sentinel, Roles.SENTINEL_TEXT) == SENTINEL_LOADING_TEXT
    assert model.data(model.index(25, 0), Roles.NAME) is None
    assert b"projectId" in model.roleNames().values()


def test_append_inserts_rows_before_sentinel(qapp, executor):
    vm, model, events = _make_model(executor)

    async def scenario():
        await vm.start()
        events.clear()
        assert model.canFetchMore()
        model.fetchMore()
        await vm.wait_idle()

    asyncio.run(scenario())

    assert events == [("insert", 24, 47)]
    assert model.rowCount() == 49
    assert model.project_at(47).name == "Project 48"


def test_last_page_removes_sentinel(qapp, executor):
    vm, model, events = _make_model(executor, page_size=150)

    async def scenario():
        await vm.start()
        events.clear()
        await vm.load_more()

    asyncio.run(scenario())

    assert events == [("insert", 150, 199), ("remove", 200, 200)]
    assert model.rowCount() == 200
    assert not model.canFetchMore()


class _FlakySource:
    def __init__(self, executor):
        self._executor = executor
        self.offline = False

    async def fetch(self, page, page_size, search, filters):
        if self.offline:
            raise ConnectionError("offline")
        return await self._executor.fetch(page, page_size, search, filters)


def test_failed_refresh_keeps_rows(qapp, executor):
    source = _FlakySource(executor)
    vm, model, events = _make_model(source)

    async def scenario():
        await vm.start()
        events.clear()
        source.offline = True
        await vm.reset()

    asyncio.run(scenario())

    assert events == []
    assert model.rowCount() == 25
    assert model.project_at(0).name == "Project 1"
    assert vm.snapshot().error is not None
    assert not model.canFetchMore()


def test_query_change_resets_model(qapp, executor):
    vm, model, events = _make_model(executor)

    async def scenario():
        await vm.start()
        events.clear()
        await vm.set_search("Project 1")

    asyncio.run(scenario())

    assert ("reset",) in events
    assert model.rowCount() == 25
    assert model.data(model.index(1, 0), Roles.NAME) == "Project 10"
