"""Integration tests for the Cancel/Transition/Show/List order use cases."""

import pytest

from doughshop.application.cancel_order import CancelOrderHandler
from doughshop.application.list_orders import ListOrdersHandler
from doughshop.application.show_order import ShowOrderHandler
from doughshop.application.transition_order import TransitionOrderHandler
from doughshop.domain.exceptions import (
    EntityNotFoundError,
    InvalidTransitionError,
    UnauthorizedTransitionError,
)
from doughshop.domain.model.cart import Cart
from doughshop.domain.model.identity import Actor, Role
from doughshop.domain.model.order import DeliveryMethod, Order, OrderStatus, PaymentMethod
from doughshop.domain.model.value_objects import Money
from doughshop.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import (
    FakeInventoryRepository,
    FakeOrderRepository,
    FakeProductRepository,
    RecordingPublisher,
    make_product,
)

ALICE = Actor("alice")
BOB = Actor("bob")
ADMIN = Actor("staff", role=Role.ADMIN)


def _setup():
    products = FakeProductRepository([make_product("A"), make_product("B", price="60.00")])
    inventory = FakeInventoryRepository()
    ledger = InventoryLedger(inventory, products)
    orders = FakeOrderRepository()
    publisher = RecordingPublisher()
    return ledger, orders, publisher, products


def _place(ledger, orders, products, customer=ALICE, quantities=None) -> int:
    """Commit stock and store a pending order, as checkout would."""
    quantities = quantities or {"A": 2, "B": 1}
    cart = Cart(customer.cart_key)
    for product_id, qty in quantities.items():
        cart.add_line(products.get_by_id(product_id), quantity=qty)
    ledger.commit_order(quantities)
    order = Order.create(
        orders.next_id(), customer, cart.lines,
        DeliveryMethod.PICKUP, PaymentMethod.COD, Money.of("50.00"),
    )
    orders.save(order)
    return order.id


class TestCancelOrder:

    def test_cancel_reverts_every_line(self):
        ledger, orders, publisher, products = _setup()
        order_id = _place(ledger, orders, products)
        assert ledger.get_available("A") == 18

        dto = CancelOrderHandler(orders, ledger, publisher).handle(order_id, ALICE)

        assert dto.status == "cancelled"
        assert dto.cancelled_by == "customer"
        assert ledger.get_available("A") == 20
        assert ledger.get_available("B") == 20
        assert "OrderCancelled" in publisher.names()

    def test_second_cancel_rejected_and_stock_not_double_credited(self):
        ledger, orders, publisher, products = _setup()
        order_id = _place(ledger, orders, products)
        ledger.commit_sale("A", 5)
        handler = CancelOrderHandler(orders, ledger, publisher)
        handler.handle(order_id, ADMIN)

        with pytest.raises(InvalidTransitionError):
            handler.handle(order_id, ADMIN)
        assert ledger.get_available("A") == 15

    def test_other_customer_cannot_cancel(self):
        ledger, orders, publisher, products = _setup()
        order_id = _place(ledger, orders, products)

        with pytest.raises(UnauthorizedTransitionError):
            CancelOrderHandler(orders, ledger, publisher).handle(order_id, BOB)
        assert ledger.get_available("A") == 18
        assert orders.get_by_id(order_id).status is OrderStatus.PENDING

    def test_unknown_order(self):
        ledger, orders, publisher, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            CancelOrderHandler(orders, ledger, publisher).handle(42, ADMIN)


class TestTransitionOrder:

    def test_admin_advances_order(self):
        ledger, orders, publisher, products = _setup()
        order_id = _place(ledger, orders, products)
        handler = TransitionOrderHandler(orders, ledger, publisher)

        for status in ("confirmed", "preparing", "ready", "delivered"):
            dto = handler.handle(order_id, OrderStatus(status), ADMIN)
        assert dto.status == "delivered"
        assert len(orders.get_by_id(order_id).history) == 4
        assert publisher.names().count("OrderStatusChanged") == 4

    def test_delivered_cannot_go_back(self):
        ledger, orders, publisher, products = _setup()
        order_id = _place(ledger, orders, products)
        handler = TransitionOrderHandler(orders, ledger, publisher)
        for status in ("confirmed", "preparing", "ready", "delivered"):
            handler.handle(order_id, OrderStatus(status), ADMIN)

        with pytest.raises(InvalidTransitionError):
            handler.handle(order_id, OrderStatus.PREPARING, ADMIN)

    def test_customer_cannot_advance(self):
        ledger, orders, publisher, products = _setup()
        order_id = _place(ledger, orders, products)
        with pytest.raises(UnauthorizedTransitionError):
            TransitionOrderHandler(orders, ledger, publisher).handle(
                order_id, OrderStatus.CONFIRMED, ALICE
            )

    def test_transition_to_cancelled_reverts_stock(self):
        ledger, orders, publisher, products = _setup()
        order_id = _place(ledger, orders, products)
        handler = TransitionOrderHandler(orders, ledger, publisher)
        handler.handle(order_id, OrderStatus.CONFIRMED, ADMIN)

        dto = handler.handle(order_id, OrderStatus.CANCELLED, ADMIN)

        assert dto.cancelled_by == "admin"
        assert ledger.get_available("A") == 20


class TestOrderQueries:

    def test_customer_sees_only_own_orders(self):
        ledger, orders, _, products = _setup()
        mine = _place(ledger, orders, products, ALICE)
        theirs = _place(ledger, orders, products, BOB)

        assert ShowOrderHandler(orders).handle(mine, ALICE).id == mine
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(orders).handle(theirs, ALICE)
        assert ShowOrderHandler(orders).handle(theirs, ADMIN).id == theirs

    def test_history_split_into_active_and_completed(self):
        ledger, orders, publisher, products = _setup()
        first = _place(ledger, orders, products, ALICE, {"A": 1})
        second = _place(ledger, orders, products, ALICE, {"B": 1})
        _place(ledger, orders, products, BOB, {"A": 1})
        CancelOrderHandler(orders, ledger, publisher).handle(first, ALICE)

        history = ListOrdersHandler(orders).handle(ALICE)

        assert [o.id for o in history.active] == [second]
        assert [o.id for o in history.completed] == [first]

    def test_admin_filters_by_status(self):
        ledger, orders, publisher, products = _setup()
        first = _place(ledger, orders, products, ALICE, {"A": 1})
        _place(ledger, orders, products, BOB, {"A": 1})
        TransitionOrderHandler(orders, ledger, publisher).handle(
            first, OrderStatus.CONFIRMED, ADMIN
        )

        history = ListOrdersHandler(orders).handle(ADMIN, OrderStatus.PENDING)

        assert len(history.active) == 1
        assert history.completed == []
