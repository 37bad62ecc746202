"""Typer-based CLI entry point."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .appctx import AppContext
from .config import DEFAULT_VIEWPORT_HEIGHT, SENTINEL_END_TEXT, SENTINEL_LOADING_TEXT
from .domain.models import ProjectFilters, ProjectQuery
from .errors import (
    DataLoadError,
    InvalidFilterValueError,
    ProjectBrowserError,
    ProjectNotFoundError,
    SettingsError,
    TransientFetchError,
)
from .gui.ui.widgets.virtual_list import RowKind, VirtualRowList
from .gui.viewmodels.project_list_viewmodel import ListSnapshot
from .settings.manager import SettingsManager
from .utils.logging import get_logger

app = typer.Typer(help="Browse, search and filter the project portfolio")
settings_app = typer.Typer(help="Inspect and change list settings")
app.add_typer(settings_app, name="settings")

_state: dict = {"settings_path": None}


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (
            InvalidFilterValueError,
            ProjectNotFoundError,
            DataLoadError,
            SettingsError,
            TransientFetchError,
        ) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except ProjectBrowserError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _load_settings() -> SettingsManager:
    manager = SettingsManager(_state["settings_path"])
    manager.load()
    return manager


def _context(delay_ms: Optional[int] = None) -> AppContext:
    return AppContext(settings=_load_settings(), delay_ms=delay_ms)


def _build_query(
    search: str,
    status: str,
    categories: List[str],
    owners: List[str],
    tags: List[str],
    updated_since: str,
    page_size: Optional[int],
    default_page_size: int,
) -> ProjectQuery:
    filters = ProjectFilters.create(
        status=status,
        categories=categories,
        owners=owners,
        tags=tags,
        updated_since=updated_since,
    )
    return ProjectQuery(
        search=search,
        filters=filters,
        page_size=page_size if page_size is not None else default_page_size,
    )


async def _load_pages(ctx: AppContext, query: ProjectQuery, pages: int) -> ListSnapshot:
    viewmodel = ctx.viewmodel
    await (viewmodel.set_query(query) or viewmodel.start())
    for _ in range(pages - 1):
        task = viewmodel.load_more()
        if task is None:
            break
        await task
    snapshot = viewmodel.snapshot()
    if snapshot.error is not None and not snapshot.items:
        raise snapshot.error
    return snapshot


def _warn_partial(snapshot: ListSnapshot) -> None:
    if snapshot.error is not None:
        print(
            f"[yellow]Warning: {escape(str(snapshot.error))}; "
            f"showing the {len(snapshot.items):,} projects loaded before the failure"
        )


def _fetch(ctx: AppContext, query: ProjectQuery, pages: int) -> ListSnapshot:
    try:
        return asyncio.run(_load_pages(ctx, query, pages))
    finally:
        ctx.shutdown()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    settings: Optional[Path] = typer.Option(None, "--settings", help="Settings file to use"),
) -> None:
    """Configure logging and the settings location for every command."""

    get_logger(logging.DEBUG if verbose else logging.WARNING)
    _state["settings_path"] = settings


@app.command("list")
@_handle_errors
def list_projects(
    search: str = typer.Option("", "--search", "-s", help="Case-insensitive text search"),
    status: str = typer.Option("all", "--status", help="active, planning, paused, completed or all"),
    category: List[str] = typer.Option([], "--category", "-c", help="Repeat to match any of several"),
    owner: List[str] = typer.Option([], "--owner", "-o", help="Repeat to match any of several"),
    tag: List[str] = typer.Option([], "--tag", "-t", help="Repeat to require every tag"),
    updated_since: str = typer.Option("any", "--updated-since", help="any, 7d, 30d or 90d"),
    pages: int = typer.Option(1, "--pages", min=1, help="Number of pages to load"),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1),
    delay_ms: Optional[int] = typer.Option(None, "--delay-ms", min=0, help="Override the simulated latency"),
) -> None:
    """List projects matching the search text and filters."""

    ctx = _context(delay_ms)
    query = _build_query(
        search, status, category, owner, tag, updated_since, page_size, ctx.settings.page_size
    )
    viewmodel = ctx.viewmodel
    snapshot = _fetch(ctx, query, pages)

    if snapshot.items:
        table = Table(title=viewmodel.filter_overview())
        table.add_column("ID", justify="right")
        table.add_column("Name")
        table.add_column("Status")
        table.add_column("Category")
        table.add_column("Owner")
        table.add_column("Tags")
        table.add_column("Updated")
        for project in snapshot.items:
            table.add_row(
                project.id,
                project.name,
                project.status.value,
                project.category,
                project.owner,
                ", ".join(project.tags),
                project.updated_at.date().isoformat(),
            )
        Console().print(table)
    print(viewmodel.summary_text())
    _warn_partial(snapshot)
    if snapshot.has_more and snapshot.error is None:
        print(f"[dim]{SENTINEL_LOADING_TEXT} (use --pages to load more)")


@app.command()
@_handle_errors
def show(project_id: str = typer.Argument(..., help="Identifier of the project")) -> None:
    """Print the details of a single project."""

    ctx = _context()
    try:
        project = ctx.repository.get(project_id)
    finally:
        ctx.shutdown()
    print(f"[bold]{project.name}[/bold] (#{project.id})")
    print(f"Status:   {project.status.value}")
    print(f"Category: {project.category}")
    print(f"Owner:    {project.owner}")
    print(f"Tags:     {', '.join(project.tags) or '-'}")
    print(f"Updated:  {project.updated_at.isoformat()}")
    print(project.summary)
    if project.description:
        print(project.description)


@app.command()
@_handle_errors
def window(
    scroll: float = typer.Option(0.0, "--scroll", min=0.0, help="Scroll offset in pixels"),
    height: float = typer.Option(float(DEFAULT_VIEWPORT_HEIGHT), "--height", min=0.0, help="Viewport height"),
    search: str = typer.Option("", "--search", "-s"),
    pages: int = typer.Option(1, "--pages", min=1, help="Number of pages loaded before measuring"),
    delay_ms: Optional[int] = typer.Option(None, "--delay-ms", min=0),
) -> None:
    """Show which rows a virtualized list would materialize."""

    ctx = _context(delay_ms)
    query = ProjectQuery(search=search, page_size=ctx.settings.page_size)
    virtual_list = VirtualRowList(
        estimated_row_height=ctx.settings.row_height,
        overscan=ctx.settings.overscan,
    )
    snapshot = _fetch(ctx, query, pages)
    virtual_list.set_row_count(len(snapshot.items), snapshot.has_more)
    current = virtual_list.calculate_range(scroll, height)

    table = Table(title=f"Rows {current.first_index}-{current.last_index} of {virtual_list.row_count}")
    table.add_column("Row", justify="right")
    table.add_column("Offset", justify="right")
    table.add_column("Height", justify="right")
    table.add_column("Content")
    for row in current.rows:
        if row.kind is RowKind.SENTINEL:
            content = SENTINEL_LOADING_TEXT if snapshot.has_more else SENTINEL_END_TEXT
        else:
            content = snapshot.items[row.index].name
        table.add_row(str(row.index), f"{row.start:g}", f"{row.size:g}", content)
    Console().print(table)
    print(f"Total height: {current.total_size:g}")
    _warn_partial(snapshot)
    if virtual_list.reached_end(current, is_loading=False):
        print("[yellow]Sentinel visible: the next page would be requested")


@settings_app.command("show")
@_handle_errors
def settings_show() -> None:
    """Print the current settings as JSON."""

    manager = _load_settings()
    print(f"[dim]{manager.path}")
    typer.echo(json.dumps(manager.as_dict(), indent=2, sort_keys=True))


@settings_app.command("set")
@_handle_errors
def settings_set(key: str, value: str) -> None:
    """Set a dotted settings *key*; the value is parsed as JSON when possible."""

    manager = _load_settings()
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    manager.set(key, parsed)
    print(f"[green]Set {key} = {parsed!r}")


if __name__ == "__main__":  # pragma: no cover
    app()
