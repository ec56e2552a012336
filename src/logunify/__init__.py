from typing import Optional

from logunify.exc import Error, NotInitializedError, RequestError
from logunify.options import Options
from logunify.telemetry.dispatcher_factory import EventDispatcherFactory
from logunify.telemetry.event_dispatcher import EventDispatcher
from logunify.telemetry.models.enums import FlushOutcome
from logunify.telemetry.models.event import LogUnifyEvent
from logunify.telemetry.push_client import IEventPushClient

__version__ = "0.1.0"


def setup(
    options: Optional[Options] = None,
    push_client: Optional[IEventPushClient] = None,
    **kwargs,
) -> EventDispatcher:
    """
    Create the process-wide dispatcher or reconfigure the existing one.

    Options can be given as an Options instance or as keyword arguments:

        logunify.setup(api_key="...", batch_interval=10000)

    On reconfiguration only the fields that are set (truthy) replace the
    current values.
    """
    if options is None:
        options = Options(**kwargs)
    elif kwargs:
        options = options.merge(Options(**kwargs))
    return EventDispatcherFactory.setup(options, push_client=push_client)


def get() -> EventDispatcher:
    """Return the dispatcher. Raises NotInitializedError before setup()."""
    return EventDispatcherFactory.get()


def log(event: LogUnifyEvent):
    EventDispatcherFactory.get().log(event)


def close():
    EventDispatcherFactory.close()


__all__ = [
    "Error",
    "EventDispatcher",
    "FlushOutcome",
    "IEventPushClient",
    "LogUnifyEvent",
    "NotInitializedError",
    "Options",
    "RequestError",
    "close",
    "get",
    "log",
    "setup",
]
