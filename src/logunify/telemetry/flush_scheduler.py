import threading
import time
import logging
from typing import Callable, Optional, Set

logger = logging.getLogger(__name__)


class FlushScheduler:
    """
    Debounced one-shot timer for deferred flushes.

    A timer is armed only if none was ever armed, or if more than one interval
    has elapsed since the last one was armed. Bursts of events inside a window
    therefore share a single timer. Timers run the callback on their own daemon
    thread and are tracked so they can be cancelled on shutdown.
    """

    def __init__(self, callback: Callable[[], object], interval_seconds: float):
        self._callback = callback
        self._interval_seconds = interval_seconds
        self._last_scheduled_at: Optional[float] = None
        self._timers: Set[threading.Timer] = set()
        self._lock = threading.RLock()

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @interval_seconds.setter
    def interval_seconds(self, value: float):
        # Timers that are already armed keep their original delay
        with self._lock:
            self._interval_seconds = value

    @property
    def last_scheduled_at(self) -> Optional[float]:
        return self._last_scheduled_at

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._timers)

    def maybe_schedule(self) -> bool:
        """Arm a timer unless one was armed within the last interval."""
        with self._lock:
            now = time.monotonic()
            if (
                self._last_scheduled_at is not None
                and now - self._last_scheduled_at <= self._interval_seconds
            ):
                return False

            logger.debug(
                "Scheduled a batch sent in %s seconds.", self._interval_seconds
            )
            self._last_scheduled_at = now
            timer = threading.Timer(self._interval_seconds, self._fire)
            timer.daemon = True
            # _fire needs its own handle to untrack itself
            timer.args = (timer,)
            self._timers.add(timer)
            timer.start()
            return True

    def _fire(self, timer: threading.Timer):
        with self._lock:
            self._timers.discard(timer)
        try:
            self._callback()
        except Exception as e:
            logger.error("Scheduled flush failed: %s", e)

    def cancel(self):
        """Cancel every pending timer. Flushes that already started are not interrupted."""
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        if timers:
            logger.debug("Cancelled %s pending scheduled flushes", len(timers))
