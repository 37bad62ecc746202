"""Events describing the lifecycle of project list fetches."""

from dataclasses import dataclass
from typing import Any, Optional

from .domain_events import DomainEvent


@dataclass(frozen=True)
class QueryChangedEvent(DomainEvent):
    generation: int = 0
    query: Any = None


@dataclass(frozen=True)
class PageLoadedEvent(DomainEvent):
    generation: int = 0
    page: int = 0
    item_count: int = 0
    total_count: int = 0
    append: bool = False


@dataclass(frozen=True)
class FetchFailedEvent(DomainEvent):
    generation: int = 0
    page: int = 0
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class StaleResponseDiscardedEvent(DomainEvent):
    """Published when a completed fetch lost the race to a newer one."""

    generation: int = 0
    live_generation: int = 0
    page: int = 0
