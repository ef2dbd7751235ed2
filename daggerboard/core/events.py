"""
Event bus for Daggerboard change notifications.

Decouples the state layer from whatever delivers updates to the UI
windows (the SSE route, tests, a desktop shell).

Usage:
    from daggerboard.core.events import get_event_bus
    from daggerboard.enums import EventType

    bus = get_event_bus()
    bus.on(EventType.ENTITIES_UPDATED, my_handler)

    # Handler receives event
    def my_handler(event: ChangeEvent):
        print(event.payload["entities"])
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from ..enums import EventType
from ..errors import EmitError

logger = logging.getLogger(__name__)


@dataclass
class ChangeEvent:
    """
    Event payload for the event bus.

    Attributes:
        type: The event name (from EventType)
        payload: JSON-compatible body delivered to observers
        timestamp: When the event was emitted
    """

    type: EventType
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {sorted(self.payload)}"

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.type.value, "payload": self.payload}


# Type alias for event handlers
EventHandler = Callable[[ChangeEvent], None]


class EventBus:
    """
    Synchronous publish/subscribe bus.

    Handlers run on the emitting thread, in subscription order. Handlers
    registered with on_any() receive every event after the typed handlers.
    A failing handler does not stop the others; once all have run, emit()
    raises EmitError.
    """

    def __init__(self, history_limit: int = 100):
        self._listeners: dict[EventType, list[EventHandler]] = {}
        self._wildcard: list[EventHandler] = []
        self._history: list[ChangeEvent] = []
        self._history_limit = history_limit
        self._mutex = threading.Lock()

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to one event type."""
        with self._mutex:
            handlers = self._listeners.setdefault(event_type, [])
            if handler not in handlers:
                handlers.append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from one event type."""
        with self._mutex:
            handlers = self._listeners.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

    def on_any(self, handler: EventHandler) -> None:
        """Subscribe to every event type."""
        with self._mutex:
            if handler not in self._wildcard:
                self._wildcard.append(handler)

    def off_any(self, handler: EventHandler) -> None:
        with self._mutex:
            if handler in self._wildcard:
                self._wildcard.remove(handler)

    def emit(self, event_type: EventType, **payload: Any) -> ChangeEvent:
        """
        Emit an event to all subscribers.

        Args:
            event_type: The event name
            **payload: Event body

        Returns:
            The emitted ChangeEvent

        Raises:
            EmitError: if any handler raised
        """
        event = ChangeEvent(type=event_type, payload=payload)

        with self._mutex:
            self._history.append(event)
            if len(self._history) > self._history_limit:
                self._history = self._history[-self._history_limit :]
            handlers = list(self._listeners.get(event_type, [])) + list(self._wildcard)

        failures = []
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.exception(f"Handler {handler!r} failed for {event_type.value}")
                failures.append(e)

        if failures:
            raise EmitError(f"{len(failures)} handler(s) failed for {event_type.value}: {failures[0]}")

        logger.debug(f"Emitted {event}")
        return event

    def clear(self) -> None:
        """Clear all listeners and history. Useful for testing."""
        with self._mutex:
            self._listeners.clear()
            self._wildcard.clear()
            self._history.clear()

    def get_history(self, event_type: EventType | None = None) -> list[ChangeEvent]:
        """Recent events, optionally filtered by type."""
        with self._mutex:
            if event_type is None:
                return list(self._history)
            return [e for e in self._history if e.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        """Number of handlers for an event type, including wildcard ones."""
        with self._mutex:
            return len(self._listeners.get(event_type, [])) + len(self._wildcard)


# Global singleton instance
_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the process-wide event bus."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    """Reset the global event bus. Useful for testing."""
    global _event_bus
    _event_bus = None
