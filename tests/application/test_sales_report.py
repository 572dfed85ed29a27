"""Integration tests for the SalesReport use case."""

from datetime import date, datetime, timedelta, timezone

from doughshop.application.sales_report import ReportPeriod, SalesReportHandler
from doughshop.domain.model.cart import Cart
from doughshop.domain.model.identity import Actor, Role
from doughshop.domain.model.order import DeliveryMethod, Order, PaymentMethod
from doughshop.domain.model.value_objects import Money
from tests.fakes import FakeOrderRepository, make_product

NOW = datetime(2026, 3, 18, 15, 0, tzinfo=timezone.utc)


def _store(orders, lines, payment=PaymentMethod.GCASH, delivery=DeliveryMethod.PICKUP, at=NOW):
    cart = Cart("alice")
    for product, qty in lines:
        cart.add_line(product, quantity=qty)
    order = Order.create(
        orders.next_id(), Actor("alice"), cart.lines, delivery, payment, Money.of("50.00")
    )
    order.created_at = at
    orders.save(order)
    return order


def _report(orders, **kwargs):
    return SalesReportHandler(orders, clock=lambda: NOW).handle(**kwargs)


class TestSalesReport:

    def test_empty(self):
        dto = _report(FakeOrderRepository())
        assert dto.order_count == 0
        assert dto.revenue == "₱0.00"
        assert dto.average_order_value == "₱0.00"
        assert len(dto.revenue_by_day) == 7
        assert all(day.order_count == 0 for day in dto.revenue_by_day)

    def test_figures_exclude_cancelled_orders(self):
        orders = FakeOrderRepository()
        box = make_product("A", name="Box", price="120.00")
        glazed = make_product("B", name="Glazed", price="60.00")
        _store(orders, [(box, 2)])
        _store(orders, [(glazed, 1)], PaymentMethod.COD, DeliveryMethod.DELIVERY)
        cancelled = _store(orders, [(box, 5)])
        cancelled.cancel(Actor("staff", role=Role.ADMIN))
        orders.save(cancelled)

        dto = _report(orders)

        assert dto.period == "all"
        assert dto.order_count == 2
        assert dto.revenue == "₱350.00"
        assert dto.average_order_value == "₱175.00"
        assert dto.top_products == [("Box", 2), ("Glazed", 1)]
        assert dto.orders_by_status == {"pending": 2, "cancelled": 1}
        assert dto.orders_by_payment_method == {"gcash": 1, "cod": 1}


class TestReportPeriods:

    def _orders(self):
        orders = FakeOrderRepository()
        box = make_product("A", name="Box", price="100.00")
        _store(orders, [(box, 1)], at=NOW)
        _store(orders, [(box, 2)], at=NOW - timedelta(days=3))
        _store(orders, [(box, 3)], at=NOW - timedelta(days=10))
        _store(orders, [(box, 4)], at=NOW - timedelta(days=40))
        _store(orders, [(box, 5)], at=NOW - timedelta(days=400))
        return orders

    def test_order_counts_per_period(self):
        orders = self._orders()
        counts = {p: _report(orders, period=p).order_count for p in ReportPeriod}
        assert counts == {
            ReportPeriod.TODAY: 1,
            ReportPeriod.WEEK: 2,
            ReportPeriod.MONTH: 3,
            ReportPeriod.YEAR: 4,
            ReportPeriod.ALL: 5,
        }

    def test_today_revenue(self):
        dto = _report(self._orders(), period=ReportPeriod.TODAY)
        assert dto.revenue == "₱100.00"
        assert dto.top_products == [("Box", 1)]

    def test_revenue_by_day_covers_last_seven_days(self):
        orders = self._orders()
        cancelled = _store(orders, [(make_product("A", name="Box", price="100.00"), 9)])
        cancelled.cancel(Actor("staff", role=Role.ADMIN))
        orders.save(cancelled)

        days = _report(orders, period=ReportPeriod.TODAY).revenue_by_day

        assert [d.day for d in days] == [date(2026, 3, 12) + timedelta(days=n) for n in range(7)]
        by_day = {d.day: (d.order_count, d.revenue) for d in days}
        assert by_day[date(2026, 3, 18)] == (1, "₱100.00")
        assert by_day[date(2026, 3, 15)] == (1, "₱200.00")
        assert by_day[date(2026, 3, 16)] == (0, "₱0.00")
