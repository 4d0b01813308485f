"""In-process event feed for live view updates."""

import asyncio
import logging
from typing import Any

logger = logging.getLogger(__name__)


class EventBus:
    """Fan-out of state-change events to subscriber queues."""

    def __init__(self, maxsize: int = 100):
        self._maxsize = maxsize
        self._subscribers: list[asyncio.Queue] = []

    def subscribe(self) -> asyncio.Queue:
        """Subscribe to state-change events."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._maxsize)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        """Unsubscribe from state-change events."""
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def publish(self, event_type: str, **data: Any) -> None:
        """Broadcast an event to all subscribers."""
        message = {"type": event_type, "data": data}

        for queue in self._subscribers:
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.debug(f"Dropping {event_type} event for a full subscriber queue")
