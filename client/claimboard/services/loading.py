"""Process-wide guard for in-flight mutating calls."""

from contextlib import contextmanager
from typing import Iterator, Optional

from claimboard.services.events import EventBus


class LoadingFlag:
    """Single boolean held while a claim or add-user call is in flight.

    It only gates the initiation of mutating actions; reads such as history
    paging or selection changes are never blocked by it.
    """

    def __init__(self, events: Optional[EventBus] = None):
        self._active = False
        self._events = events

    @property
    def active(self) -> bool:
        return self._active

    def _set(self, value: bool) -> None:
        if self._active == value:
            return
        self._active = value
        if self._events is not None:
            self._events.publish("loading_changed", active=value)

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Hold the flag for the duration of the block, releasing on any exit."""
        if self._active:
            raise RuntimeError("Loading flag is already held")
        self._set(True)
        try:
            yield
        finally:
            self._set(False)
