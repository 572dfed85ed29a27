"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from doughshop.domain.model.cart import Cart
from doughshop.domain.model.inventory import StockRecord
from doughshop.domain.model.order import Order


@dataclass(frozen=True)
class CartLineDTO:
    line_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "₱120.00"
    line_total: str
    customization: str


@dataclass(frozen=True)
class CartDTO:
    customer_key: str
    lines: list[CartLineDTO]
    total: str
    total_items: int


@dataclass(frozen=True)
class CartUpdateDTO:
    """Result of a quantity change; ``warning`` is set when it was refused."""

    cart: CartDTO
    warning: str | None = None


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: str
    product_name: str
    quantity: int
    unit_price: str
    line_total: str
    customization: str


@dataclass(frozen=True)
class OrderDTO:
    id: int
    customer_id: str
    customer_email: str
    status: str
    items: list[OrderLineDTO]
    subtotal: str
    delivery_fee: str
    total: str
    delivery_method: str
    payment_method: str
    created_at: str
    cancelled_by: str | None


@dataclass(frozen=True)
class OrderHistoryDTO:
    active: list[OrderDTO]
    completed: list[OrderDTO]


@dataclass(frozen=True)
class StockLineDTO:
    product_id: str
    product_name: str
    daily_limit: int
    current_stock: int
    sold_today: int
    status: str
    low: bool


# --- Mapping ------------------------------------------------------------------


def cart_to_dto(cart: Cart) -> CartDTO:
    return CartDTO(
        customer_key=cart.customer_key,
        lines=[
            CartLineDTO(
                line_id=line.id,
                product_id=line.product_id,
                product_name=line.product.name,
                quantity=line.quantity.value,
                unit_price=str(line.product.price),
                line_total=str(line.line_total),
                customization=str(line.customization),
            )
            for line in cart.lines
        ],
        total=str(cart.total),
        total_items=cart.total_items,
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        customer_id=order.customer_id,
        customer_email=order.customer_email,
        status=order.status.value,
        items=[
            OrderLineDTO(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
                customization=str(line.customization),
            )
            for line in order.lines
        ],
        subtotal=str(order.subtotal),
        delivery_fee=str(order.delivery_fee),
        total=str(order.total),
        delivery_method=order.delivery_method.value,
        payment_method=order.payment_method.value,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        cancelled_by=order.cancelled_by.value if order.cancelled_by else None,
    )


def stock_to_dto(record: StockRecord, product_name: str) -> StockLineDTO:
    return StockLineDTO(
        product_id=record.product_id,
        product_name=product_name,
        daily_limit=record.daily_limit,
        current_stock=record.current_stock,
        sold_today=record.sold_today,
        status=record.status.value,
        low=record.is_low,
    )
