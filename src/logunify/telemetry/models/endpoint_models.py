import base64
from dataclasses import dataclass
from typing import List
from logunify.telemetry.models.event import LogUnifyEvent
from logunify.telemetry.utils import JsonSerializableMixin


@dataclass
class PostedEvent(JsonSerializableMixin):
    """
    Wire representation of one event inside a bulk request.

    Attributes:
        serializedEvent (str): Base64 encoding of the event's serialized bytes
        schemaName (str): Schema identifier of the event
        projectName (str): Project identifier of the event
    """

    serializedEvent: str
    schemaName: str
    projectName: str

    @classmethod
    def from_event(cls, event: LogUnifyEvent) -> "PostedEvent":
        return cls(
            serializedEvent=base64.b64encode(bytes(event.serialize())).decode("ascii"),
            schemaName=event.get_schema_name(),
            projectName=event.get_project_name(),
        )


@dataclass
class BulkEventsRequest(JsonSerializableMixin):
    """
    Body of a bulk POST to the collector.

    Attributes:
        events (List[PostedEvent]): One batch of events, in buffer order
    """

    events: List[PostedEvent]
