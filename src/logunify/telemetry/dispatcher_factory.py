import threading
import logging
from typing import Optional

from logunify.exc import NotInitializedError
from logunify.options import Options
from logunify.telemetry.event_dispatcher import EventDispatcher
from logunify.telemetry.push_client import IEventPushClient

logger = logging.getLogger(__name__)


class EventDispatcherFactory:
    """
    Owns the process-wide EventDispatcher.

    setup() creates the dispatcher on first use and merges configuration into
    it afterwards; get() fails until setup() has been called.
    """

    _instance: Optional[EventDispatcher] = None
    _lock = threading.RLock()

    @classmethod
    def setup(
        cls, options: Options, push_client: Optional[IEventPushClient] = None
    ) -> EventDispatcher:
        """Create the dispatcher, or reconfigure the existing one in place."""
        with cls._lock:
            if cls._instance is None:
                logger.debug("Creating EventDispatcher")
                cls._instance = EventDispatcher(options, push_client=push_client)
            else:
                cls._instance.configure(options)
            return cls._instance

    @classmethod
    def get(cls) -> EventDispatcher:
        instance = cls._instance
        if instance is None:
            raise NotInitializedError(
                "Logger is not initialized, please call setup() to initialize the logger."
            )
        return instance

    @classmethod
    def close(cls):
        """Close and forget the dispatcher so setup() starts from scratch."""
        with cls._lock:
            if (instance := cls._instance) is not None:
                cls._instance = None
                try:
                    instance.close()
                except Exception as e:
                    logger.debug("Failed to close EventDispatcher: %s", e)
