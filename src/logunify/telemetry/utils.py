import json
from dataclasses import asdict, is_dataclass
from abc import ABC, abstractmethod


class BaseEventDispatcher(ABC):
    """
    Base class for event dispatchers.
    It is used to define the interface for event dispatchers.
    """

    @abstractmethod
    def log(self, event):
        """Buffer one event for delivery."""

    @abstractmethod
    def flush(self):
        """Send buffered events to the collector."""

    @abstractmethod
    def close(self):
        """Stop scheduling and release resources."""


class JsonSerializableMixin:
    """Mixin class to provide JSON serialization capabilities to dataclasses."""

    def to_json(self) -> str:
        """
        Convert the object to a JSON string, excluding None values.
        """
        if not is_dataclass(self):
            raise TypeError(
                f"{self.__class__.__name__} must be a dataclass to use JsonSerializableMixin"
            )

        return json.dumps(
            asdict(
                self,
                dict_factory=lambda data: {k: v for k, v in data if v is not None},
            )
        )
