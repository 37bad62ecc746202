"""Project list ViewModel (MVVM) - pure Python, no Qt dependency.

Owns the current :class:`ProjectQuery` and a :class:`FetchSession`.  Every
query change starts a fresh page-0 fetch under a new generation;
:meth:`ProjectListViewModel.load_more` appends the next page.  Fetches run as
``asyncio`` tasks on a single event loop and may complete in any order; a
completion is applied only when its generation is still the live one, all
earlier completions are dropped without touching state.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, Optional, Set, Tuple, Union

from project_browser.domain.models import (
    PageResult,
    Project,
    ProjectFilters,
    ProjectQuery,
    ProjectStatus,
    UpdatedSince,
)
from project_browser.domain.repositories import ProjectSource
from project_browser.errors import InvalidFilterValueError, TransientFetchError
from project_browser.events.bus import EventBus
from project_browser.events.list_events import (
    FetchFailedEvent,
    PageLoadedEvent,
    QueryChangedEvent,
    StaleResponseDiscardedEvent,
)

from .base import BaseViewModel
from .fetch_session import FetchSession, LoadPhase
from .signal import ObservableProperty, Signal, apply_batch

SelectionUpdate = Union[Iterable[str], Callable[[FrozenSet[str]], Iterable[str]]]


@dataclass(frozen=True)
class ListSnapshot:
    """Read-only view of the list state handed to presentation code."""

    items: Tuple[Project, ...]
    total: int
    is_loading: bool
    is_initial_loading: bool
    has_more: bool
    error: Optional[Exception]
    is_stale: bool = False


class ProjectListViewModel(BaseViewModel):
    """Fetch coordinator for the project list."""

    def __init__(
        self,
        source: ProjectSource,
        query: Optional[ProjectQuery] = None,
        event_bus: Optional[EventBus] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        super().__init__(event_bus)
        self._source = source
        self._query = query or ProjectQuery()
        self._loop = loop
        self._session = FetchSession()
        self._tasks: Set[asyncio.Task] = set()
        self._logger = logging.getLogger(__name__)

        # Observable properties
        self.items = ObservableProperty(())
        self.total_count = ObservableProperty(0)
        self.loading = ObservableProperty(False)
        self.initial_loading = ObservableProperty(False)
        self.has_more = ObservableProperty(False)
        self.error = ObservableProperty(None)

        # Signals
        self.state_changed = Signal()  # emits (ListSnapshot)
        self.page_loaded = Signal()  # emits (page, items, append)
        self.error_occurred = Signal()  # emits (error)

    # -- read model ---------------------------------------------------------

    @property
    def query(self) -> ProjectQuery:
        return self._query

    @property
    def generation(self) -> int:
        return self._session.generation

    @property
    def phase(self) -> LoadPhase:
        return self._session.phase

    @property
    def current_page(self) -> int:
        return self._session.current_page

    def snapshot(self) -> ListSnapshot:
        session = self._session
        return ListSnapshot(
            items=tuple(session.items),
            total=session.total_count,
            is_loading=session.is_loading,
            is_initial_loading=session.is_initial_loading,
            has_more=session.has_more,
            error=session.error,
            is_stale=session.stale,
        )

    def get_project(self, index: int) -> Optional[Project]:
        """Return the loaded project at *index*, or ``None``."""
        items = self._session.items
        if 0 <= index < len(items):
            return items[index]
        return None

    def filter_overview(self) -> str:
        active = self._query.filters.active_count
        if not active and not self._query.search:
            return "No filters applied"
        parts = []
        if active:
            parts.append(f"{active:,} filter{'' if active == 1 else 's'} active")
        if self._query.search:
            parts.append("Search applied")
        return " · ".join(parts)

    def summary_text(self) -> str:
        session = self._session
        search = self._query.search
        if session.is_initial_loading:
            return "Fetching projects…"
        if not session.items:
            return f"No projects match “{search}”." if search else "No projects available."
        prefix = "Filtered" if search else "Showing"
        active = self._query.filters.active_count
        suffix = f" · {active} filter{'s' if active > 1 else ''} active" if active else ""
        return f"{prefix} {len(session.items):,} of {session.total_count:,} projects{suffix}."

    # -- commands -----------------------------------------------------------

    def start(self) -> asyncio.Task:
        """Issue the first page-0 fetch for the current query."""
        return self._refresh()

    def reset(self) -> asyncio.Task:
        """Re-fetch page 0 under a new generation (manual refresh / retry)."""
        return self._refresh()

    def load_more(self) -> Optional[asyncio.Task]:
        """Append the next page; no-op while loading or when nothing is left."""
        if not self._session.can_load_more:
            return None
        loop = self._event_loop()
        generation = self._session.begin_append()
        page = self._session.current_page + 1
        self._publish_state()
        return self._spawn(loop, generation, page, append=True)

    def set_query(self, query: ProjectQuery) -> Optional[asyncio.Task]:
        if not isinstance(query, ProjectQuery):
            raise InvalidFilterValueError(f"Expected a ProjectQuery, got {query!r}")
        if query == self._query:
            return None
        # Fail before mutating anything when no loop can run the fetch
        self._event_loop()
        self._query = query
        self.publish_event(QueryChangedEvent(
            source=type(self).__name__,
            generation=self._session.generation + 1,
            query=query,
        ))
        return self._refresh()

    def set_search(self, text: str) -> Optional[asyncio.Task]:
        if not isinstance(text, str):
            raise InvalidFilterValueError(f"Search text must be a string, got {text!r}")
        return self.set_query(self._query.with_search(text))

    def set_page_size(self, page_size: int) -> Optional[asyncio.Task]:
        return self.set_query(self._query.with_page_size(page_size))

    def set_status_filter(self, value: Union[str, ProjectStatus, None]) -> Optional[asyncio.Task]:
        return self._set_filters(self._query.filters.with_status(value))

    def set_category_filters(self, values: SelectionUpdate) -> Optional[asyncio.Task]:
        filters = self._query.filters
        return self._set_filters(filters.with_categories(_resolve(values, filters.categories)))

    def set_owner_filters(self, values: SelectionUpdate) -> Optional[asyncio.Task]:
        filters = self._query.filters
        return self._set_filters(filters.with_owners(_resolve(values, filters.owners)))

    def set_tag_filters(self, values: SelectionUpdate) -> Optional[asyncio.Task]:
        filters = self._query.filters
        return self._set_filters(filters.with_tags(_resolve(values, filters.tags)))

    def set_updated_since_filter(self, value: Union[str, UpdatedSince]) -> Optional[asyncio.Task]:
        return self._set_filters(self._query.filters.with_updated_since(value))

    def clear_filters(self) -> Optional[asyncio.Task]:
        """Drop the search text and every filter with a single refetch."""
        return self.set_query(ProjectQuery(page_size=self._query.page_size))

    async def wait_idle(self) -> None:
        """Wait until no fetch task (live or abandoned) is pending."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def dispose(self) -> None:
        self._session.invalidate()
        for task in list(self._tasks):
            task.cancel()
        super().dispose()

    # -- internals ----------------------------------------------------------

    def _set_filters(self, filters: ProjectFilters) -> Optional[asyncio.Task]:
        return self.set_query(self._query.with_filters(filters))

    def _event_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def _refresh(self) -> asyncio.Task:
        loop = self._event_loop()
        generation = self._session.begin_initial()
        self._publish_state()
        return self._spawn(loop, generation, 0, append=False)

    def _spawn(
        self,
        loop: asyncio.AbstractEventLoop,
        generation: int,
        page: int,
        append: bool,
    ) -> asyncio.Task:
        query = self._query
        task = loop.create_task(self._run_fetch(generation, page, append, query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._logger.debug(
            "Issued fetch generation=%d page=%d append=%s", generation, page, append
        )
        return task

    async def _run_fetch(
        self,
        generation: int,
        page: int,
        append: bool,
        query: ProjectQuery,
    ) -> Optional[PageResult]:
        try:
            result = await self._source.fetch(page, query.page_size, query.search, query.filters)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._on_fetch_failed(generation, page, exc)
            return None
        self._on_fetch_completed(generation, page, append, result)
        return result

    def _on_fetch_completed(self, generation: int, page: int, append: bool, result: PageResult) -> None:
        if not self._session.complete(generation, result, append):
            self._discard_stale(generation, page)
            return
        self._publish_state()
        self.page_loaded.emit(result.page, result.items, append)
        self.publish_event(PageLoadedEvent(
            source=type(self).__name__,
            generation=generation,
            page=result.page,
            item_count=len(result.items),
            total_count=result.total_count,
            append=append,
        ))

    def _on_fetch_failed(self, generation: int, page: int, exc: Exception) -> None:
        error = exc
        if not isinstance(exc, TransientFetchError):
            error = TransientFetchError(f"Failed to fetch page {page}: {exc}")
            error.__cause__ = exc
        if not self._session.fail(generation, error):
            self._discard_stale(generation, page)
            return
        self._logger.warning("Fetch generation=%d page=%d failed: %s", generation, page, exc)
        self._publish_state()
        self.error_occurred.emit(error)
        self.publish_event(FetchFailedEvent(
            source=type(self).__name__,
            generation=generation,
            page=page,
            error=error,
        ))

    def _discard_stale(self, generation: int, page: int) -> None:
        self._logger.debug(
            "Discarded stale response generation=%d (live=%d) page=%d",
            generation, self._session.generation, page,
        )
        self.publish_event(StaleResponseDiscardedEvent(
            source=type(self).__name__,
            generation=generation,
            live_generation=self._session.generation,
            page=page,
        ))

    def _publish_state(self) -> None:
        snapshot = self.snapshot()
        apply_batch([
            (self.items, snapshot.items),
            (self.total_count, snapshot.total),
            (self.loading, snapshot.is_loading),
            (self.initial_loading, snapshot.is_initial_loading),
            (self.has_more, snapshot.has_more),
            (self.error, snapshot.error),
        ])
        self.state_changed.emit(snapshot)


def _resolve(values: SelectionUpdate, current: FrozenSet[str]) -> Iterable[str]:
    if callable(values):
        return values(current)
    return values
