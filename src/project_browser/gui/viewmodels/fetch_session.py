"""Mutable fetch session owned by the project list view-model.

The session is a small state machine::

    IDLE -> INITIAL_LOADING -> READY <-> APPEND_LOADING
              ^                  |
              +------------------+   (query change / reset)

``generation`` is incremented for every issued fetch and is the only thing
that decides whether a completed fetch may touch ``items``.  A page-0 fetch
leaves the previous rows in place until it succeeds; if it fails they stay
visible but are marked ``stale`` and no page is appended to them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from project_browser.domain.models import PageResult, Project


class LoadPhase(Enum):
    IDLE = "idle"
    INITIAL_LOADING = "initial_loading"
    READY = "ready"
    APPEND_LOADING = "append_loading"


@dataclass
class FetchSession:
    current_page: int = 0
    items: List[Project] = field(default_factory=list)
    total_count: int = 0
    phase: LoadPhase = LoadPhase.IDLE
    error: Optional[Exception] = None
    generation: int = 0
    stale: bool = False

    # -- derived state -----------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.phase in (LoadPhase.INITIAL_LOADING, LoadPhase.APPEND_LOADING)

    @property
    def is_initial_loading(self) -> bool:
        return self.phase is LoadPhase.INITIAL_LOADING

    @property
    def has_more(self) -> bool:
        return len(self.items) < self.total_count

    @property
    def can_load_more(self) -> bool:
        return self.phase is LoadPhase.READY and self.has_more and not self.stale

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    # -- transitions -------------------------------------------------------

    def begin_initial(self) -> int:
        """Start a page-0 fetch; current rows stay until it completes."""
        self.generation += 1
        self.error = None
        self.phase = LoadPhase.INITIAL_LOADING
        return self.generation

    def begin_append(self) -> Optional[int]:
        """Start fetching the page after ``current_page``.

        Returns ``None`` (and changes nothing) unless the session is ready
        and more rows exist.
        """
        if not self.can_load_more:
            return None
        self.generation += 1
        self.error = None
        self.phase = LoadPhase.APPEND_LOADING
        return self.generation

    def complete(self, generation: int, result: PageResult, append: bool) -> bool:
        """Apply *result* if it belongs to the live generation."""
        if not self.is_current(generation):
            return False
        if append:
            self.items.extend(result.items)
        else:
            self.items = list(result.items)
        self.total_count = result.total_count
        self.current_page = result.page
        self.error = None
        self.stale = False
        self.phase = LoadPhase.READY
        return True

    def fail(self, generation: int, error: Exception) -> bool:
        """Record *error* if it belongs to the live generation.

        Accumulated items are kept so the list degrades to stale data
        instead of going blank.  After a failed page-0 fetch they may belong
        to an earlier query, so appending stays blocked until a refresh
        succeeds.
        """
        if not self.is_current(generation):
            return False
        if self.phase is LoadPhase.INITIAL_LOADING:
            self.stale = True
        self.error = error
        self.phase = LoadPhase.READY
        return True

    def invalidate(self) -> int:
        """Orphan every in-flight fetch without starting a new one."""
        self.generation += 1
        if self.is_initial_loading and self.items:
            self.stale = True
        if self.is_loading:
            self.phase = LoadPhase.READY if self.items or self.total_count else LoadPhase.IDLE
        return self.generation
