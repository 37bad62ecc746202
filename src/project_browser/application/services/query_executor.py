"""Asynchronous query executor over an in-memory project collection.

Filters the whole backing collection, slices the requested page and
suspends for an artificial network delay before returning.  The executor
satisfies the ``ProjectSource`` protocol through :meth:`QueryExecutor.fetch`.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from datetime import datetime
from typing import Callable, Optional, Protocol, Sequence, Tuple

from project_browser.config import NETWORK_DELAY_MS, QUERY_CACHE_SIZE
from project_browser.domain.filters import filter_projects, normalize_search, utc_now
from project_browser.domain.models import PageResult, Project, ProjectFilters, UpdatedSince

LOGGER = logging.getLogger(__name__)


class ProjectCollection(Protocol):
    """Minimal protocol for the backing side of a project repository."""

    def snapshot(self) -> Tuple[int, Sequence[Project]]: ...


_CacheKey = Tuple[int, str, ProjectFilters]


class QueryExecutor:
    """Computes result pages for (page, page size, search, filters).

    When ``cache_size`` is positive, the filtered list for a
    ``(collection version, search, filters)`` key is memoized.  Queries with
    an ``updated_since`` bound depend on the wall clock and are never
    memoized.
    """

    def __init__(
        self,
        collection: ProjectCollection,
        delay_ms: int = NETWORK_DELAY_MS,
        clock: Optional[Callable[[], datetime]] = None,
        cache_size: int = 0,
    ) -> None:
        self._collection = collection
        self._delay = max(0, delay_ms) / 1000.0
        self._clock = clock or utc_now
        self._cache_size = cache_size if cache_size > 0 else 0
        self._cache: "OrderedDict[_CacheKey, Tuple[Project, ...]]" = OrderedDict()

    @classmethod
    def with_default_cache(cls, collection: ProjectCollection, **kwargs) -> "QueryExecutor":
        return cls(collection, cache_size=QUERY_CACHE_SIZE, **kwargs)

    @property
    def delay_ms(self) -> int:
        return int(self._delay * 1000)

    # -- public API --------------------------------------------------------

    async def execute(
        self,
        page: int,
        page_size: int,
        search: str,
        filters: ProjectFilters,
    ) -> PageResult:
        if isinstance(page, bool) or not isinstance(page, int) or page < 0:
            raise ValueError(f"page must be a non-negative integer, got {page!r}")
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise ValueError(f"page_size must be a positive integer, got {page_size!r}")

        matched = self.filtered(search, filters)
        start = page * page_size
        items = matched[start : start + page_size]
        if self._delay:
            await asyncio.sleep(self._delay)
        LOGGER.debug(
            "Executed page=%d size=%d search=%r -> %d/%d",
            page, page_size, search, len(items), len(matched),
        )
        return PageResult(
            items=tuple(items),
            page=page,
            page_size=page_size,
            total_count=len(matched),
        )

    fetch = execute

    def filtered(self, search: str, filters: ProjectFilters) -> Tuple[Project, ...]:
        """Return every project matching *search* and *filters* in source order."""
        version, projects = self._collection.snapshot()
        cacheable = self._cache_size and filters.updated_since is UpdatedSince.ANY
        if not cacheable:
            return tuple(filter_projects(projects, search, filters, self._clock()))

        key = (version, normalize_search(search), filters)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            return cached
        result = tuple(filter_projects(projects, search, filters, self._clock()))
        self._cache[key] = result
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)
        return result

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_len(self) -> int:
        return len(self._cache)
