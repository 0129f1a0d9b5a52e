"""
Event bus for domain events.

Synchronous in-process pub/sub. Handlers execute immediately in the same
thread as the publisher. Handler errors are logged but never propagate: the
publisher (the webhook receiver) must acknowledge the delivery regardless.
"""

import logging
from typing import Callable, Dict, List

from core.events import DomainEvent

logger = logging.getLogger(__name__)


class EventBus:
    """
    In-process event bus.

    Subscribe by event class name (string), publish by event instance.
    Handlers are called synchronously in subscription order.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable):
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Name of event class to subscribe to (e.g. 'InvoicePaid')
            callback: Function to call when event is published
        """
        self._subscribers.setdefault(event_type, []).append(callback)

    def publish(self, event: DomainEvent) -> int:
        """
        Publish an event to all subscribers of that type.

        Args:
            event: DomainEvent instance to publish

        Returns:
            Number of handlers that completed without raising
        """
        event_type = event.__class__.__name__
        succeeded = 0

        for callback in self._subscribers.get(event_type, []):
            try:
                callback(event)
                succeeded += 1
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (event_id=%s)",
                    getattr(callback, "__name__", repr(callback)),
                    event_type,
                    event.event_id,
                )

        return succeeded
