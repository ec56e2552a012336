import threading
import logging
import urllib.parse
from typing import List, Optional

from logunify.constants import MAX_ATTEMPTS, MAX_BULK_SIZE, MAX_UNSENT_EVENTS
from logunify.common.http import HttpMethod, HttpHeader
from logunify.common.unified_http_client import UnifiedHttpClient
from logunify.log_format import configure_logger
from logunify.options import Options
from logunify.telemetry.event_buffer import EventBuffer
from logunify.telemetry.flush_scheduler import FlushScheduler
from logunify.telemetry.models.endpoint_models import BulkEventsRequest, PostedEvent
from logunify.telemetry.models.enums import FlushOutcome
from logunify.telemetry.models.event import LogUnifyEvent
from logunify.telemetry.push_client import (
    IEventPushClient,
    EventPushClient,
    CircuitBreakerEventPushClient,
)
from logunify.telemetry.utils import BaseEventDispatcher

logger = logging.getLogger(__name__)


class EventDispatcher(BaseEventDispatcher):
    """
    Buffers events and delivers them to the collector in bulk.

    A flush is triggered by a debounced timer armed from log(), or
    synchronously when the buffer length reaches exactly min_batch_size.
    Only one flush cycle runs at a time; a flush requested while another is
    running is dropped rather than queued. Each batch gets max_attempts
    sequential attempts before the cycle is abandoned, leaving the failed
    batch at the head of the buffer for the next trigger.
    """

    def __init__(
        self,
        options: Options,
        push_client: Optional[IEventPushClient] = None,
        max_bulk_size: int = MAX_BULK_SIZE,
        max_attempts: int = MAX_ATTEMPTS,
        max_unsent_events: int = MAX_UNSENT_EVENTS,
    ):
        self._options = Options.defaults().merge(options)
        configure_logger(self._options.enable_debug_log)
        logger.debug("Initializing EventDispatcher for %s", self._options.receiver_url)

        self._max_bulk_size = max_bulk_size
        self._max_attempts = max_attempts
        self._buffer = EventBuffer(max_unsent_events)
        self._scheduler = FlushScheduler(
            self.flush, self._options.batch_interval_seconds
        )
        self._flush_lock = threading.Lock()
        self._is_sending_events = False
        self._owns_push_client = push_client is None
        self._push_client = push_client or self._create_push_client(self._options)

    @staticmethod
    def _create_push_client(options: Options) -> IEventPushClient:
        push_client = EventPushClient(UnifiedHttpClient(options.to_client_context()))
        if options.enable_circuit_breaker:
            host = urllib.parse.urlparse(options.receiver_url).hostname or ""
            push_client = CircuitBreakerEventPushClient(push_client, host)
        return push_client

    @property
    def options(self) -> Options:
        return self._options

    @property
    def buffer(self) -> EventBuffer:
        return self._buffer

    @property
    def scheduler(self) -> FlushScheduler:
        return self._scheduler

    @property
    def is_sending_events(self) -> bool:
        return self._is_sending_events

    def configure(self, options: Options) -> "EventDispatcher":
        """
        Merge the truthy fields of `options` into the current configuration.

        Buffered events and armed timers are left untouched. When a transport
        setting changes and the push client was built here, a new one is
        built and swapped in once any running flush cycle has finished; the
        old one is closed. A push client passed in by the caller is kept.
        """
        merged = self._options.merge(options)
        if merged.transport_differs(self._options):
            if self._owns_push_client:
                self._replace_push_client(merged)
            else:
                logger.debug(
                    "Transport settings changed, keeping the push client supplied at creation"
                )
        self._options = merged
        self._scheduler.interval_seconds = self._options.batch_interval_seconds
        if options.enable_debug_log:
            configure_logger(True)
        logger.debug("Reconfigured EventDispatcher")
        return self

    def _replace_push_client(self, options: Options):
        push_client = self._create_push_client(options)
        with self._flush_lock:
            stale, self._push_client = self._push_client, push_client
            self._options = options
        stale.close()
        logger.debug("Rebuilt push client for %s", options.receiver_url)

    def log(self, event: LogUnifyEvent):
        """Buffer an event and trigger a flush if one is due."""
        size = self._buffer.append(event)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Logged event", extra={"event": event.to_dict()})

        self._scheduler.maybe_schedule()

        if size == self._options.min_batch_size:
            logger.debug("Scheduled an immediate batch sent.")
            self.flush()

    def flush(self) -> FlushOutcome:
        """Run one flush cycle, unless one is already running."""
        if not self._flush_lock.acquire(blocking=False):
            logger.debug("Flush already in progress, skipping.")
            return FlushOutcome.SKIPPED

        self._is_sending_events = True
        try:
            logger.debug("Started batch event sending.")
            while self._buffer.size() > 0:
                batch = self._buffer.take_batch(self._max_bulk_size)
                if not self._deliver(batch):
                    logger.debug(
                        "Retried %s times but still failed to send, skipping this batch.",
                        self._max_attempts,
                    )
                    return FlushOutcome.ABANDONED
                self._buffer.drain(len(batch))
            return FlushOutcome.DRAINED
        finally:
            self._is_sending_events = False
            self._flush_lock.release()

    def _deliver(self, batch: List[LogUnifyEvent]) -> bool:
        for attempt in range(1, self._max_attempts + 1):
            if self._make_request(batch):
                return True
            logger.debug(
                "Attempt %s of %s failed for batch of %s events",
                attempt,
                self._max_attempts,
                len(batch),
            )
        return False

    def _make_request(self, events: List[LogUnifyEvent]) -> bool:
        """Send one batch. Any exception counts as a failed attempt."""
        headers = {
            HttpHeader.CONTENT_TYPE.value: "application/json",
            HttpHeader.AUTH_TOKEN.value: self._options.api_key,
        }
        try:
            request = BulkEventsRequest(
                events=[PostedEvent.from_event(event) for event in events]
            )
            self._push_client.request(
                HttpMethod.POST,
                self._options.receiver_url,
                headers,
                body=request.to_json(),
            )
            logger.debug("Successfully sent %s events.", len(events))
            return True
        except Exception as e:
            logger.debug("Failed to send %s events with error: %s", len(events), e)
            return False

    def close(self):
        """Cancel pending timers, flush what is left and release the transport."""
        logger.debug("Closing EventDispatcher")
        self._scheduler.cancel()
        self.flush()
        self._push_client.close()
