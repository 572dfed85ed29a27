"""Order aggregate — the core of the domain.

An Order is created from a validated cart and is immutable afterwards
except for its status, who cancelled it, and the status history.  Every
status change goes through ``check_transition`` so the role rules live in
one place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from doughshop.domain.exceptions import (
    InvalidTransitionError,
    UnauthorizedTransitionError,
    ValidationError,
)
from doughshop.domain.model.cart import CartLine
from doughshop.domain.model.identity import Actor, Role
from doughshop.domain.model.product import Customization
from doughshop.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


class DeliveryMethod(Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class PaymentMethod(Enum):
    GCASH = "gcash"
    COD = "cod"


# Forward edges only; CANCELLED is reachable from every non-terminal status.
VALID_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.OUT_FOR_DELIVERY}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


@dataclass(frozen=True)
class OrderLine:
    """Point-in-time copy of a cart line; later catalog changes never reach it."""

    line_id: str
    product_id: str
    product_name: str
    unit_price: Money
    quantity: Quantity
    customization: Customization = field(default_factory=Customization)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @staticmethod
    def from_cart_line(line: CartLine) -> OrderLine:
        return OrderLine(
            line_id=line.id,
            product_id=line.product.id,
            product_name=line.product.name,
            unit_price=line.product.price,
            quantity=line.quantity,
            customization=line.customization,
        )


@dataclass(frozen=True)
class StatusChange:
    from_status: OrderStatus
    to_status: OrderStatus
    role: Role
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def check_transition(order: Order, new_status: OrderStatus, actor: Actor) -> None:
    """Raise unless *actor* may move *order* to *new_status*.

    - Terminal orders never move (InvalidTransitionError).
    - Admins may cancel any non-terminal order and follow the forward graph.
    - Customers may only cancel their own order, and only while pending.
    """
    current = order.status
    if current.is_terminal:
        raise InvalidTransitionError(
            f"Order #{order.id} is {current.value}; no further changes allowed"
        )

    if new_status is OrderStatus.CANCELLED:
        if actor.is_admin:
            return
        if actor.customer_id != order.customer_id:
            raise UnauthorizedTransitionError(
                f"Order #{order.id} belongs to another customer"
            )
        if current is not OrderStatus.PENDING:
            raise UnauthorizedTransitionError(
                f"Customers can only cancel pending orders "
                f"(order #{order.id} is {current.value})"
            )
        return

    if not actor.is_admin:
        raise UnauthorizedTransitionError("Only admins can update order status")

    if new_status not in VALID_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Cannot transition order #{order.id} from {current.value} "
            f"to {new_status.value}"
        )


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int
    customer_id: str
    lines: tuple[OrderLine, ...]
    delivery_method: DeliveryMethod
    payment_method: PaymentMethod
    delivery_fee: Money = field(default_factory=Money.zero)
    customer_email: str = ""
    notes: str = ""
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    cancelled_by: Role | None = None
    history: list[StatusChange] = field(default_factory=list)
    # Bumped by the repository on every save; 0 means never saved.
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: int,
        customer: Actor,
        lines: list[CartLine],
        delivery_method: DeliveryMethod,
        payment_method: PaymentMethod,
        delivery_fee: Money,
        notes: str = "",
    ) -> Order:
        """Create a pending order from cart lines, enforcing all invariants."""
        if not customer.customer_id:
            raise ValidationError("Customer id is required to place an order")
        if not lines:
            raise ValidationError("Order must contain at least one item")

        fee = delivery_fee if delivery_method is DeliveryMethod.DELIVERY else Money.zero()
        return Order(
            id=order_id,
            customer_id=customer.customer_id,
            customer_email=customer.email,
            lines=tuple(OrderLine.from_cart_line(line) for line in lines),
            delivery_method=delivery_method,
            payment_method=payment_method,
            delivery_fee=fee,
            notes=notes,
        )

    # --- State transitions ----------------------------------------------------

    def transition_to(self, new_status: OrderStatus, actor: Actor) -> None:
        """Move along the status graph.  Stock is not touched here.

        Cancellation must go through ``cancel()`` so the caller also
        reverts stock.
        """
        if new_status is OrderStatus.CANCELLED:
            self.cancel(actor)
            return
        check_transition(self, new_status, actor)
        self._record(new_status, actor.role)

    def cancel(self, actor: Actor) -> None:
        """Transition any non-terminal status -> CANCELLED.

        Stock revert must happen alongside this call (coordinated by the
        application handler via the ledger).
        """
        check_transition(self, OrderStatus.CANCELLED, actor)
        self.cancelled_by = actor.role
        self._record(OrderStatus.CANCELLED, actor.role)

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return Money.sum(line.line_total for line in self.lines)

    @property
    def total(self) -> Money:
        return self.subtotal + self.delivery_fee

    @property
    def is_active(self) -> bool:
        return not self.status.is_terminal

    def quantities_by_product(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for line in self.lines:
            totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity.value
        return totals

    # --- Internal helpers -----------------------------------------------------

    def _record(self, new_status: OrderStatus, role: Role) -> None:
        self.history.append(StatusChange(self.status, new_status, role))
        self.status = new_status
