from .bus import Event, EventBus, Subscription
from .domain_events import DomainEvent
from .list_events import (
    FetchFailedEvent,
    PageLoadedEvent,
    QueryChangedEvent,
    StaleResponseDiscardedEvent,
)

__all__ = [
    "DomainEvent",
    "Event",
    "EventBus",
    "FetchFailedEvent",
    "PageLoadedEvent",
    "QueryChangedEvent",
    "StaleResponseDiscardedEvent",
    "Subscription",
]
