"""Event system for observing changes to the in-memory record set."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any

from booklib.core.models import Record

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events published by the library."""

    # Record events
    RECORD_ADDED = auto()
    RECORD_UPDATED = auto()
    RECORD_DELETED = auto()

    # Record-set events
    RECORDS_LOADED = auto()
    RECORDS_CHANGED = auto()
    LOADING_CHANGED = auto()


@dataclass
class Event:
    """An event that occurred in the library."""

    type: EventType
    timestamp: datetime
    data: dict[str, Any]

    @property
    def record_id(self) -> str | None:
        """Get record id if this is a record-related event."""
        return self.data.get("record_id")

    @property
    def record(self) -> Record | None:
        """Get record if included in event data."""
        return self.data.get("record")

    @property
    def records(self) -> list[Record] | None:
        """Get the record-set snapshot if included in event data."""
        return self.data.get("records")


class EventBus:
    """Simple event bus for publishing and subscribing to events."""

    def __init__(self, history_limit: int = 1000):
        self._subscribers: dict[EventType, list[Callable[[Event], None]]] = {}
        self._history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self, event_type: EventType, handler: Callable[[Event], None]
    ) -> None:
        """Subscribe to events of a specific type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)

    def unsubscribe(
        self, event_type: EventType, handler: Callable[[Event], None]
    ) -> None:
        """Unsubscribe from events."""
        if event_type in self._subscribers:
            self._subscribers[event_type].remove(handler)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribers."""
        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        for handler in list(self._subscribers.get(event.type, [])):
            try:
                handler(event)
            except Exception:
                # Subscriber errors never break publishing
                logger.exception(f"Event handler failed for {event.type.name}")

    def get_history(
        self, event_type: EventType | None = None, limit: int = 100
    ) -> list[Event]:
        """Get event history."""
        history = self._history

        if event_type:
            history = [e for e in history if e.type == event_type]

        return history[-limit:]

    def clear_history(self) -> None:
        """Clear event history."""
        self._history.clear()


class EventPublisher:
    """Mixin for classes that publish events."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus

    def _publish_event(self, event_type: EventType, **data) -> None:
        """Publish an event."""
        event = Event(type=event_type, timestamp=datetime.now(), data=data)
        self.event_bus.publish(event)
