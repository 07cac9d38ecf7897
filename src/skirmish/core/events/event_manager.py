"""
Event bus connecting the battle to its observers.

The simulator and the combat resolver publish what happens on the battlefield;
the log manager, the CLI and tests subscribe. Publishers never know who is
listening. Events published during a round are queued and delivered together
when the round ends, ordered by priority and then by publication order.
"""

import heapq
import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


class EventPriority(Enum):
    """Delivery priority. Lower value is delivered first."""
    CRITICAL = 1
    HIGH = 2
    NORMAL = 3
    LOW = 4


@dataclass
class QueuedEvent:
    """A published event waiting for delivery."""
    event: "GameEvent"
    priority: EventPriority = EventPriority.NORMAL
    timestamp: datetime = field(default_factory=datetime.now)
    sequence: int = 0
    source: Optional[str] = None

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.priority.value, self.sequence)

    def __lt__(self, other: "QueuedEvent") -> bool:
        return self.sort_key < other.sort_key


EventSubscriber = Callable[["GameEvent"], None]


@dataclass
class Subscription:
    """A subscriber callback and the name it is reported under."""
    callback: EventSubscriber
    name: str

    @classmethod
    def create(cls, callback: EventSubscriber, name: Optional[str] = None) -> "Subscription":
        return cls(callback, name or getattr(callback, '__name__', 'anonymous'))


class EventManager:
    """Publish/subscribe bus for battle events."""

    def __init__(self, enable_debug_logging: bool = False, history_size: int = 1000):
        """Create an empty bus.

        Args:
            enable_debug_logging: Report bus activity through the debug callback
            history_size: Number of delivered events kept for get_recent_events()
        """
        self.enable_debug_logging = enable_debug_logging

        self._subscriptions: dict["EventType", list[Subscription]] = defaultdict(list)
        self._universal: list[Subscription] = []
        self._queue: list[QueuedEvent] = []
        self._history: deque[QueuedEvent] = deque(maxlen=history_size)

        self._published = 0
        self._delivered = 0
        self._subscriber_errors = 0

        self._lock = threading.RLock()
        self._debug_callback: Optional[Callable[[str], None]] = None

    def set_debug_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        self._debug_callback = callback

    def _debug_log(self, message: str) -> None:
        if self.enable_debug_logging and self._debug_callback:
            self._debug_callback(f"[EVENT] {message}")

    # ============== Subscriptions ==============

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Call subscriber with every delivered event of event_type.

        Args:
            event_type: Type of events to receive
            subscriber: Callback taking the event
            subscriber_name: Name used in debug messages, defaults to the
                callback's __name__
        """
        subscription = Subscription.create(subscriber, subscriber_name)
        with self._lock:
            self._subscriptions[event_type].append(subscription)
        self._debug_log(f"{subscription.name} subscribed to {event_type.name}")

    def subscribe_all(self, subscriber: EventSubscriber, subscriber_name: Optional[str] = None) -> None:
        """Call subscriber with every delivered event, whatever its type."""
        subscription = Subscription.create(subscriber, subscriber_name)
        with self._lock:
            self._universal.append(subscription)
        self._debug_log(f"{subscription.name} subscribed to all events")

    def unsubscribe(self, event_type: "EventType", subscriber: EventSubscriber) -> bool:
        """Stop delivering event_type to subscriber.

        Returns:
            True if the subscriber was registered for event_type
        """
        with self._lock:
            return self._remove(self._subscriptions[event_type], subscriber)

    def unsubscribe_all(self, subscriber: EventSubscriber) -> bool:
        """Remove a subscriber registered with subscribe_all()."""
        with self._lock:
            return self._remove(self._universal, subscriber)

    @staticmethod
    def _remove(subscriptions: list[Subscription], subscriber: EventSubscriber) -> bool:
        for index, subscription in enumerate(subscriptions):
            if subscription.callback == subscriber:
                del subscriptions[index]
                return True
        return False

    # ============== Publishing ==============

    def publish(
        self,
        event: "GameEvent",
        priority: EventPriority = EventPriority.NORMAL,
        source: Optional[str] = None
    ) -> None:
        """Queue an event for the next process_events() call."""
        with self._lock:
            self._published += 1
            queued = QueuedEvent(event, priority, sequence=self._published, source=source or "unknown")
            heapq.heappush(self._queue, queued)
        self._debug_log(f"Queued {type(event).__name__} ({priority.name}) from {queued.source}")

    def publish_immediate(self, event: "GameEvent", source: Optional[str] = None) -> None:
        """Deliver an event right away, bypassing the queue."""
        with self._lock:
            self._published += 1
            queued = QueuedEvent(
                event, EventPriority.CRITICAL, sequence=self._published, source=source or "immediate"
            )
        self._deliver(queued)

    def process_events(self, max_events: Optional[int] = None) -> int:
        """Deliver queued events, highest priority first.

        Subscribers may publish while being called; those events join the
        queue and are delivered in the same call when max_events allows.

        Args:
            max_events: Stop after this many deliveries (None for no limit)

        Returns:
            Number of events delivered
        """
        delivered = 0
        while max_events is None or delivered < max_events:
            with self._lock:
                if not self._queue:
                    break
                queued = heapq.heappop(self._queue)
            self._deliver(queued)
            delivered += 1
        return delivered

    def _deliver(self, queued: QueuedEvent) -> None:
        event = queued.event
        with self._lock:
            self._history.append(queued)
            self._delivered += 1
            recipients = list(self._subscriptions.get(event.event_type, [])) + list(self._universal)

        for subscription in recipients:
            try:
                subscription.callback(event)
            except Exception as e:
                # One failing observer must not stop delivery to the others
                with self._lock:
                    self._subscriber_errors += 1
                self._debug_log(f"{subscription.name} failed on {type(event).__name__}: {e}")

    # ============== Inspection ==============

    def has_queued_events(self) -> bool:
        with self._lock:
            return bool(self._queue)

    def clear_queue(self) -> int:
        """Drop every queued event and return how many were dropped."""
        with self._lock:
            count = len(self._queue)
            self._queue.clear()
        return count

    def get_statistics(self) -> dict[str, Any]:
        with self._lock:
            return {
                'events_published': self._published,
                'events_processed': self._delivered,
                'events_queued': len(self._queue),
                'subscriber_errors': self._subscriber_errors,
                'subscribers_count': sum(len(subs) for subs in self._subscriptions.values()),
                'universal_subscribers_count': len(self._universal),
                'event_history_size': len(self._history),
            }

    def get_recent_events(self, count: int = 10) -> list[dict[str, Any]]:
        """Summaries of the most recently delivered events, oldest first."""
        with self._lock:
            recent = list(self._history)[-count:]
        return [
            {
                'event_type': type(queued.event).__name__,
                'round': queued.event.round_number,
                'priority': queued.priority.name,
                'source': queued.source,
                'timestamp': queued.timestamp.isoformat(),
            }
            for queued in recent
        ]

    def shutdown(self) -> None:
        """Forget all subscribers, queued events and history."""
        with self._lock:
            self._subscriptions.clear()
            self._universal.clear()
            self._queue.clear()
            self._history.clear()
