"""Domain bus interfaces for in-process event handling."""

from __future__ import annotations

from typing import Callable, Protocol, Type

from doughshop.domain.events import DomainEvent

EventHandler = Callable[[DomainEvent], None]


class EventPublisher(Protocol):
    """What the domain needs: somewhere to hand events to."""

    def publish(self, event: DomainEvent) -> None: ...


class EventBus(EventPublisher, Protocol):

    def subscribe(self, event_class: Type[DomainEvent], handler: EventHandler) -> None: ...


class NullPublisher:
    """Publisher used when nobody is listening."""

    def publish(self, event: DomainEvent) -> None:
        pass
