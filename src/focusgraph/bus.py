# bus.py
from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Dict, Optional

from .model import ChangeNotification

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 32

_CLOSED = object()


class Subscription:
    """
    One delivery target. Events wait in a bounded queue until the
    subscriber reads them with `get()`.
    """

    def __init__(self, sub_id: int, maxsize: int = DEFAULT_QUEUE_SIZE):
        self.id = sub_id
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize + 1)
        self._maxsize = maxsize
        self.closed = False
        self.dropped = 0

    def offer(self, notification: ChangeNotification) -> bool:
        """Queue without blocking. Returns False if the queue is full or closed."""
        if self.closed or self._queue.qsize() >= self._maxsize:
            return False
        self._queue.put_nowait(notification)
        return True

    async def get(self) -> Optional[ChangeNotification]:
        """Next event, or None once the subscription is closed."""
        if self.closed and self._queue.empty():
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            return None
        return item

    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        # one slot is reserved for the wake-up marker
        self._queue.put_nowait(_CLOSED)


class NotificationBus:
    """
    Publish/subscribe registry for change notifications.

    Pure fan-out: every subscriber connected at publish time gets the same
    notification object. No persistence, no replay for late subscribers.
    A subscriber whose queue is full misses the event; publishing never
    waits on a subscriber.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        self.queue_size = queue_size
        self._subscribers: Dict[int, Subscription] = {}
        self._ids = itertools.count(1)

    def subscribe(self, maxsize: Optional[int] = None) -> Subscription:
        sub = Subscription(next(self._ids), maxsize or self.queue_size)
        self._subscribers[sub.id] = sub
        logger.info("Subscriber %d connected (total: %d)", sub.id, len(self._subscribers))
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        if self._subscribers.pop(sub.id, None) is not None:
            logger.info("Subscriber %d disconnected (total: %d)", sub.id, len(self._subscribers))
        sub.close()

    def publish(self, notification: ChangeNotification) -> int:
        """Hand the event to every subscriber. Returns how many accepted it."""
        delivered = 0
        for sub in list(self._subscribers.values()):
            if sub.offer(notification):
                delivered += 1
            else:
                sub.dropped += 1
                logger.warning("Subscriber %d queue full, dropping change event", sub.id)
        logger.debug("Published change event to %d subscriber(s)", delivered)
        return delivered

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def close(self) -> None:
        """Disconnect everyone (shutdown)."""
        for sub in list(self._subscribers.values()):
            self.unsubscribe(sub)
