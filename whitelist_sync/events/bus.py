"""
In-process event bus for whitelist notifications.

Subscribers are plain callables. Delivery is synchronous on the
publishing thread, in subscription order.
"""

import logging
import threading
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class WhitelistEvent(Enum):
    """Events published by the synchronizer."""

    # The stored whitelist was replaced with different content
    WHITELIST_UPDATED = "whitelist_updated"


Subscriber = Callable[[WhitelistEvent], None]


class EventBus:
    """
    Thread-safe publish/subscribe bus.

    A subscriber that raises is logged and skipped; the remaining
    subscribers still receive the event.

    Usage:
        bus = EventBus()
        bus.subscribe(lambda event: refresh_ui())
        bus.publish(WhitelistEvent.WHITELIST_UPDATED)
    """

    def __init__(self):
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> bool:
        """
        Remove a subscriber.

        Returns:
            True if it was subscribed, False otherwise
        """
        with self._lock:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                return False
            return True

    def publish(self, event: WhitelistEvent) -> int:
        """
        Deliver an event to every subscriber.

        Args:
            event: Event to deliver

        Returns:
            Number of subscribers that handled it without error
        """
        with self._lock:
            subscribers = list(self._subscribers)

        delivered = 0
        for callback in subscribers:
            try:
                callback(event)
                delivered += 1
            except Exception as e:
                logger.error(f"Subscriber {callback!r} failed on {event.name}: {e}", exc_info=True)

        logger.debug(f"Published {event.name} to {delivered}/{len(subscribers)} subscribers")
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)
