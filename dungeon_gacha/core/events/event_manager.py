"""
Event bus connecting engine components to their observers.

Battle simulations, the expedition resolver and the content loader publish
events through an emitter callable; the EventManager is the usual target of
that callable. Subscribers (the LogManager, a CLI printer, a test spy) receive
events when the caller drains the queue with ``process_events``.
"""

import itertools
import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


class EventPriority(Enum):
    """Delivery order inside one ``process_events`` call; lower goes first."""
    CRITICAL = 0
    HIGH = 1
    NORMAL = 2
    LOW = 3


_sequence = itertools.count()


@dataclass
class QueuedEvent:
    """A published event waiting for delivery."""
    event: "GameEvent"
    priority: EventPriority = EventPriority.NORMAL
    timestamp: datetime = field(default_factory=datetime.now)
    source: Optional[str] = None
    sequence: int = field(default_factory=lambda: next(_sequence))

    def __lt__(self, other: "QueuedEvent") -> bool:
        return (self.priority.value, self.sequence) < (other.priority.value, other.sequence)


EventSubscriber = Callable[["GameEvent"], None]


def _describe(subscriber: EventSubscriber, name: Optional[str] = None) -> str:
    return name or getattr(subscriber, "__name__", "anonymous")


class EventManager:
    """Queue of engine events plus the observers that consume them.

    Args:
        trace: Optional sink for ``[EVENT]`` lines describing bus activity
        history_size: How many delivered events ``get_recent_events`` can report
    """

    def __init__(self, trace: Optional[Callable[[str], None]] = None, history_size: int = 1000):
        self._trace = trace

        self._subscribers: dict["EventType", list[EventSubscriber]] = defaultdict(list)
        self._universal_subscribers: list[EventSubscriber] = []
        self._event_queue: deque[QueuedEvent] = deque()
        self._event_history: deque[QueuedEvent] = deque(maxlen=history_size)

        self._events_published = 0
        self._events_processed = 0
        self._subscriber_errors = 0

        self._lock = threading.RLock()

    def _log(self, message: str) -> None:
        if self._trace is not None:
            self._trace(f"[EVENT] {message}")

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Register a callback for one event type.

        Args:
            event_type: Which events the callback receives
            subscriber: Called with each delivered event
            subscriber_name: Label used in trace output
        """
        with self._lock:
            self._subscribers[event_type].append(subscriber)
        self._log(f"{_describe(subscriber, subscriber_name)} listens to {event_type.name}")

    def subscribe_all(self, subscriber: EventSubscriber, subscriber_name: Optional[str] = None) -> None:
        """Register a callback that receives every event, after the typed ones."""
        with self._lock:
            self._universal_subscribers.append(subscriber)
        self._log(f"{_describe(subscriber, subscriber_name)} listens to every event")

    def unsubscribe(self, event_type: "EventType", subscriber: EventSubscriber) -> bool:
        """Remove a typed subscription.

        Returns:
            False if the callback was not subscribed to that type
        """
        with self._lock:
            if subscriber not in self._subscribers[event_type]:
                return False
            self._subscribers[event_type].remove(subscriber)
        self._log(f"{_describe(subscriber)} stopped listening to {event_type.name}")
        return True

    def publish(
        self,
        event: "GameEvent",
        priority: EventPriority = EventPriority.NORMAL,
        source: Optional[str] = None
    ) -> None:
        """Queue an event for the next ``process_events`` call.

        The bound method fits the ``event_emitter`` parameter that engine
        components accept.

        Args:
            event: The event to deliver
            priority: Delivery order relative to other queued events
            source: Label kept in the event history
        """
        queued = QueuedEvent(event=event, priority=priority, source=source or "unknown")
        with self._lock:
            self._event_queue.append(queued)
            self._events_published += 1
        self._log(f"queued {event.event_type.name} ({priority.name}) from {queued.source}")

    def publish_immediate(self, event: "GameEvent", source: Optional[str] = None) -> None:
        """Deliver an event now, ahead of anything still queued."""
        with self._lock:
            self._events_published += 1
        self._deliver(QueuedEvent(event=event, priority=EventPriority.CRITICAL, source=source or "immediate"))

    def process_events(self, max_events: Optional[int] = None) -> int:
        """Deliver queued events in priority order.

        Args:
            max_events: Stop after this many; the rest stay queued in order

        Returns:
            Number of events delivered
        """
        with self._lock:
            pending = sorted(self._event_queue)
            self._event_queue.clear()

        if max_events is not None and len(pending) > max_events:
            with self._lock:
                self._event_queue.extendleft(reversed(pending[max_events:]))
            pending = pending[:max_events]

        for queued in pending:
            self._deliver(queued)
        return len(pending)

    def _deliver(self, queued: QueuedEvent) -> None:
        event = queued.event
        with self._lock:
            self._event_history.append(queued)
            self._events_processed += 1
            targets = list(self._subscribers.get(event.event_type, [])) + list(self._universal_subscribers)

        self._log(f"delivering {event.event_type.name} (turn {event.turn}) to {len(targets)} subscribers")

        # A failing observer must not stop delivery to the others
        for subscriber in targets:
            try:
                subscriber(event)
            except Exception as e:
                with self._lock:
                    self._subscriber_errors += 1
                self._log(f"subscriber {_describe(subscriber)} failed: {e}")

    def clear_queue(self) -> int:
        """Drop queued events without delivering them.

        Returns:
            How many events were dropped
        """
        with self._lock:
            count = len(self._event_queue)
            self._event_queue.clear()
        self._log(f"dropped {count} queued events")
        return count

    def get_statistics(self) -> dict[str, Any]:
        """Counters for published, delivered and queued events and subscriber failures."""
        with self._lock:
            return {
                'events_published': self._events_published,
                'events_processed': self._events_processed,
                'events_queued': len(self._event_queue),
                'subscriber_errors': self._subscriber_errors,
                'subscribers_count': sum(len(subs) for subs in self._subscribers.values()),
                'universal_subscribers_count': len(self._universal_subscribers),
                'event_history_size': len(self._event_history),
            }

    def get_recent_events(self, count: int = 10) -> list[dict[str, Any]]:
        """Summaries of the last ``count`` delivered events.

        Args:
            count: How many entries to return at most

        Returns:
            Dicts with event_type, turn, priority, source and timestamp, oldest first
        """
        with self._lock:
            recent = list(self._event_history)[-count:]
        return [
            {
                'event_type': queued.event.event_type.name,
                'turn': queued.event.turn,
                'priority': queued.priority.name,
                'source': queued.source,
                'timestamp': queued.timestamp.isoformat(),
            }
            for queued in recent
        ]

    def has_queued_events(self) -> bool:
        """Whether ``process_events`` has anything to deliver."""
        with self._lock:
            return bool(self._event_queue)

    def shutdown(self) -> None:
        """Forget all subscribers, queued events and history."""
        with self._lock:
            self._subscribers.clear()
            self._universal_subscribers.clear()
            self._event_queue.clear()
            self._event_history.clear()
        self._log("shut down")
