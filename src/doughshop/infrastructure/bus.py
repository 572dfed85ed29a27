"""In-memory event bus implementation."""

from __future__ import annotations

import threading
from typing import Dict, List, Type

import structlog

from doughshop.domain.bus import EventBus, EventHandler
from doughshop.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(EventBus):
    """Simple in-process event bus.

    Handlers run synchronously in the publisher's thread.  A failing
    handler is logged and skipped: subscribers (UI refresh, alerts) must
    never undo or block the state change that produced the event.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}
        self._guard = threading.Lock()

    def subscribe(self, event_class: Type[DomainEvent], handler: EventHandler) -> None:
        with self._guard:
            handlers = self._handlers.setdefault(event_class, [])
            if handler not in handlers:
                handlers.append(handler)

    def unsubscribe(self, event_class: Type[DomainEvent], handler: EventHandler) -> None:
        with self._guard:
            handlers = self._handlers.get(event_class, [])
            if handler in handlers:
                handlers.remove(handler)

    def publish(self, event: DomainEvent) -> None:
        with self._guard:
            handlers = list(self._handlers.get(type(event), []))
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "bus.handler_failed",
                    event_name=event.event_name,
                    aggregate_id=event.aggregate_id,
                )
