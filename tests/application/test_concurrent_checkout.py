"""Concurrency tests: racing checkouts must never oversell."""

from concurrent.futures import ThreadPoolExecutor

from doughshop.application.add_to_cart import AddToCartHandler
from doughshop.application.cancel_order import CancelOrderHandler
from doughshop.application.place_order import PlaceOrderHandler
from doughshop.domain.exceptions import DomainException, OversellRejected
from doughshop.domain.model.identity import Actor, Role
from doughshop.domain.model.inventory import StockRecord
from doughshop.domain.model.order import DeliveryMethod, PaymentMethod
from doughshop.domain.service.inventory_ledger import InventoryLedger
from doughshop.domain.service.keyed_locks import KeyedLocks
from tests.fakes import (
    FakeCartRepository,
    FakeInventoryRepository,
    FakeOrderRepository,
    FakePaymentGateway,
    FakeProductRepository,
    FakeSaleJournalRepository,
    make_product,
)


def _setup(stock: int, customers: list[str]):
    products = FakeProductRepository([make_product("A")])
    inventory = FakeInventoryRepository(
        [StockRecord(product_id="A", daily_limit=20, current_stock=stock, sold_today=20 - stock)]
    )
    carts = FakeCartRepository()
    orders = FakeOrderRepository()
    ledger = InventoryLedger(inventory, products)
    for customer in customers:
        AddToCartHandler(carts, products).handle(customer, "A")
    # The payment delay lets every checkout pass the fast pre-check before
    # any of them reaches the commit.
    handler = PlaceOrderHandler(
        cart_repo=carts,
        order_repo=orders,
        journal_repo=FakeSaleJournalRepository(),
        ledger=ledger,
        payment_gateway=FakePaymentGateway(delay=0.05),
    )
    return handler, ledger, orders


def _checkout(handler, customer):
    try:
        handler.handle(Actor(customer), PaymentMethod.GCASH, DeliveryMethod.PICKUP)
        return "ok"
    except OversellRejected:
        return "rejected"


class TestConcurrentCheckout:

    def test_last_unit_sold_exactly_once(self):
        handler, ledger, orders = _setup(stock=1, customers=["alice", "bob"])

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(lambda c: _checkout(handler, c), ["alice", "bob"]))

        assert sorted(results) == ["ok", "rejected"]
        assert ledger.get_available("A") == 0
        assert len(orders.list_all()) == 1

    def test_many_buyers_never_oversell(self):
        customers = [f"c{i}" for i in range(12)]
        handler, ledger, orders = _setup(stock=5, customers=customers)

        with ThreadPoolExecutor(max_workers=12) as pool:
            results = list(pool.map(lambda c: _checkout(handler, c), customers))

        assert results.count("ok") == 5
        assert ledger.get_available("A") == 0
        assert len(orders.list_all()) == 5
        record = ledger.get_record("A")
        assert record.current_stock + record.sold_today == record.daily_limit


class TestConcurrentCancel:

    def test_double_cancel_credits_stock_once(self):
        handler, ledger, orders = _setup(stock=3, customers=["alice"])
        dto = handler.handle(Actor("alice"), PaymentMethod.GCASH, DeliveryMethod.PICKUP)
        cancel = CancelOrderHandler(orders, ledger, order_locks=KeyedLocks())
        admin = Actor("staff", role=Role.ADMIN)

        def attempt(_):
            try:
                cancel.handle(dto.id, admin)
                return "ok"
            except DomainException:
                return "rejected"

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(attempt, range(4)))

        assert results.count("ok") == 1
        assert ledger.get_available("A") == 3
