import threading
import logging
from collections import deque
from typing import List

from logunify.constants import MAX_UNSENT_EVENTS
from logunify.telemetry.models.event import LogUnifyEvent

logger = logging.getLogger(__name__)


class EventBuffer:
    """
    Ordered, size-bounded queue of events waiting for delivery.

    Overflow drops the oldest event. The buffer is shared between the threads
    calling log() and the thread running a flush cycle, so every operation
    holds the lock.
    """

    def __init__(self, max_size: int = MAX_UNSENT_EVENTS):
        self._max_size = max_size
        self._events = deque()
        self._lock = threading.RLock()

    def append(self, event: LogUnifyEvent) -> int:
        """Add an event to the tail and return the resulting length."""
        with self._lock:
            self._events.append(event)
            if len(self._events) > self._max_size:
                logger.error(
                    "Reached max unsent events of %s, purge the oldest event.",
                    self._max_size,
                )
                self._events.popleft()
            return len(self._events)

    def take_batch(self, max_size: int) -> List[LogUnifyEvent]:
        """Return a copy of the first `max_size` events without removing them."""
        with self._lock:
            count = min(len(self._events), max_size)
            return [self._events[i] for i in range(count)]

    def drain(self, count: int):
        """Remove the first `count` events."""
        with self._lock:
            for _ in range(min(count, len(self._events))):
                self._events.popleft()

    def snapshot(self) -> List[LogUnifyEvent]:
        with self._lock:
            return list(self._events)

    def size(self) -> int:
        with self._lock:
            return len(self._events)

    def __len__(self):
        return self.size()
