"""Event type and the pub/sub contract modules publish through."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class Event:
    event_type: str  # one of the names in core.events
    source_module: str  # MODULE_ID of the publisher
    data: dict


class EventBus(ABC):
    """Handlers receive the Event; "*" subscribes to every type."""

    @abstractmethod
    def publish(self, event: Event) -> None: ...

    @abstractmethod
    def subscribe(self, event_type: str, handler: Callable[[Event], Any]) -> None: ...

    @abstractmethod
    def unsubscribe(self, event_type: str, handler: Callable) -> None: ...
