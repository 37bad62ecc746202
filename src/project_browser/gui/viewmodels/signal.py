"""Pure Python signal system with no Qt dependency.

Provides ``Signal`` for observer-pattern callbacks, ``ObservableProperty``
for view-model data binding and :func:`apply_batch` for updating several
properties as one observable transition.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, Tuple

_logger = logging.getLogger(__name__)


class Signal:
    """Pure Python signal.

    Handler mutations and emissions are protected by a lock.  Exceptions
    raised by individual handlers are caught and logged so that one failing
    handler does not prevent subsequent handlers from executing (same
    semantics as ``EventBus``).
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, handler: Callable) -> None:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception:
                _logger.exception("Signal handler %r failed", handler)

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class ObservableProperty:
    """Observable property, the foundation of view-model data binding.

    Emits ``changed(new_value, old_value)`` whenever the value is set to a
    value that compares unequal to the current one.
    """

    def __init__(self, initial_value: Any = None) -> None:
        self._value = initial_value
        self.changed = Signal()

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        changed, old_value = self._store(new_value)
        if changed:
            self.changed.emit(new_value, old_value)

    def _store(self, new_value: Any) -> Tuple[bool, Any]:
        old_value = self._value
        if old_value == new_value:
            return False, old_value
        self._value = new_value
        return True, old_value


def apply_batch(updates: Iterable[Tuple[ObservableProperty, Any]]) -> int:
    """Assign every property first, then emit the ``changed`` signals.

    Handlers of any property therefore observe the complete new state and
    never a mix of old and new values.  Returns the number of properties
    whose value changed.
    """
    pending = []
    for prop, new_value in updates:
        changed, old_value = prop._store(new_value)
        if changed:
            pending.append((prop, new_value, old_value))
    for prop, new_value, old_value in pending:
        prop.changed.emit(new_value, old_value)
    return len(pending)
