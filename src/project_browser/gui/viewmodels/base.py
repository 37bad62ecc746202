"""BaseViewModel - pure Python, no Qt dependency.

Provides subscription lifecycle management so that concrete view-models can
subscribe to ``EventBus`` events and have them cleaned up automatically via
``dispose()``.
"""

from __future__ import annotations

from typing import Callable, Optional, Type

from project_browser.events.bus import EventBus, Subscription


class BaseViewModel:
    """ViewModel base class - pure Python, no Qt dependency."""

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self._event_bus = event_bus
        self._subscriptions: list[Subscription] = []

    def subscribe_event(
        self,
        event_type: Type,
        handler: Callable,
        event_bus: Optional[EventBus] = None,
    ) -> Optional[Subscription]:
        """Subscribe to an event type and track the subscription."""
        bus = event_bus or self._event_bus
        if bus is None:
            return None
        sub = bus.subscribe(event_type, handler)
        self._subscriptions.append(sub)
        return sub

    def publish_event(self, event) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)

    def dispose(self) -> None:
        """Cancel all tracked event subscriptions."""
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
