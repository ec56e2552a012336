from abc import ABC, abstractmethod
from typing import Any, Dict


class LogUnifyEvent(ABC):
    """
    An event submitted to the dispatcher.

    The dispatcher treats events as opaque: it only reads the schema name and
    project name, and the serialized payload bytes that end up base64 encoded
    on the wire. Implementations should be immutable once logged.
    """

    @abstractmethod
    def get_schema_name(self) -> str:
        pass

    @abstractmethod
    def get_project_name(self) -> str:
        pass

    @abstractmethod
    def serialize(self) -> bytes:
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Structured view of the event, attached to debug log records."""
        return {
            "schemaName": self.get_schema_name(),
            "projectName": self.get_project_name(),
        }
