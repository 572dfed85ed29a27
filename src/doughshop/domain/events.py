"""Domain events published after stock and order state changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable)."""

    aggregate_id: str
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)


@dataclass(frozen=True)
class StockChanged(DomainEvent):
    """A product's stock record was mutated; aggregate_id is the product id."""

    current_stock: int = 0
    daily_limit: int = 0
    sold_today: int = 0


@dataclass(frozen=True)
class LowStockDetected(DomainEvent):
    """A mutation left the product at or under the low-stock threshold."""

    current_stock: int = 0
    daily_limit: int = 0


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    customer_id: str = ""
    total: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    old_status: str = ""
    new_status: str = ""
    role: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    cancelled_by: str = ""
