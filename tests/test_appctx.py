import asyncio
import json

from project_browser.appctx import AppContext
from project_browser.settings.manager import SettingsManager


def _make_settings(tmp_path, **data):
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    for key, value in data.items():
        manager.set(key, value)
    return manager


def test_context_wires_settings_into_components(tmp_path):
    settings = _make_settings(tmp_path, **{"list.page_size": 10, "list.overscan": 2})
    ctx = AppContext(settings=settings, delay_ms=0)

    assert ctx.executor.delay_ms == 0
    assert ctx.viewmodel.query.page_size == 10
    assert len(ctx.repository) == 200

    virtual_list = ctx.create_virtual_list()
    assert virtual_list.overscan == 2

    async def scenario():
        await ctx.viewmodel.start()

    asyncio.run(scenario())
    assert virtual_list.row_count == 11
    ctx.shutdown()


def test_context_loads_configured_source(tmp_path):
    source = tmp_path / "projects.json"
    source.write_text(json.dumps([
        {
            "id": "a",
            "name": "Alpha",
            "category": "Web",
            "owner": "Kai",
            "status": "active",
            "updatedAt": "2024-04-01T00:00:00Z",
        },
    ]), encoding="utf-8")
    settings = _make_settings(tmp_path, **{"data.source_path": str(source)})

    ctx = AppContext(settings=settings, delay_ms=0)

    assert ctx.repository.get("a").name == "Alpha"
    ctx.shutdown()
