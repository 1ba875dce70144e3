# core/event_bus.py - InMemoryEventBus implementation
#
# Synchronous in-process pub/sub. Services publish after their unit of work
# has committed, so subscribers only ever see changes that are durable.

import logging
from collections import defaultdict
from typing import Callable, Any

from core.interfaces.event_bus import EventBus, Event

log = logging.getLogger("printdesk.events")


class InMemoryEventBus(EventBus):
    """
    Handlers run in registration order. A handler that raises is logged and
    skipped; the publisher and the remaining handlers are unaffected.
    """

    def __init__(self):
        self._handlers: dict[str, list[Callable[[Event], Any]]] = defaultdict(list)
        # "*" subscribers receive every event
        self._wildcard_handlers: list[Callable[[Event], Any]] = []

    def _dispatch(self, handler: Callable[[Event], Any], event: Event) -> None:
        try:
            handler(event)
        except Exception as e:
            log.error(
                f"Event handler {handler!r} raised for event '{event.event_type}': {e}",
                exc_info=True,
            )

    def publish(self, event: Event) -> None:
        for handler in list(self._handlers.get(event.event_type, [])):
            self._dispatch(handler, event)
        for handler in list(self._wildcard_handlers):
            self._dispatch(handler, event)

    def subscribe(self, event_type: str, handler: Callable[[Event], Any]) -> None:
        """Register a handler for an event type ("*" for all)."""
        handlers = self._wildcard_handlers if event_type == "*" else self._handlers[event_type]
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_type: str, handler: Callable) -> None:
        handlers = self._wildcard_handlers if event_type == "*" else self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)


_bus: InMemoryEventBus = InMemoryEventBus()


def get_event_bus() -> InMemoryEventBus:
    """Return the application-level event bus singleton."""
    return _bus


def emit(event_type: str, source_module: str, **data) -> None:
    """Publish on the application bus."""
    _bus.publish(Event(event_type=event_type, source_module=source_module, data=data))
