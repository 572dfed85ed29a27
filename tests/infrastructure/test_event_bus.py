"""Tests for the in-process event bus."""

from doughshop.domain.events import OrderPlaced, StockChanged
from doughshop.infrastructure.bus import InMemoryEventBus


class TestInMemoryEventBus:

    def test_dispatch_by_event_class(self):
        bus = InMemoryEventBus()
        stock, orders = [], []
        bus.subscribe(StockChanged, stock.append)
        bus.subscribe(OrderPlaced, orders.append)

        bus.publish(StockChanged(aggregate_id="1", current_stock=3))

        assert [e.current_stock for e in stock] == [3]
        assert orders == []

    def test_failing_handler_does_not_block_others(self):
        bus = InMemoryEventBus()
        seen = []

        def broken(event):
            raise RuntimeError("subscriber down")

        bus.subscribe(StockChanged, broken)
        bus.subscribe(StockChanged, seen.append)

        bus.publish(StockChanged(aggregate_id="1"))

        assert len(seen) == 1

    def test_unsubscribe(self):
        bus = InMemoryEventBus()
        seen = []
        bus.subscribe(StockChanged, seen.append)
        bus.unsubscribe(StockChanged, seen.append)
        bus.publish(StockChanged(aggregate_id="1"))
        assert seen == []

    def test_event_name(self):
        assert StockChanged(aggregate_id="1").event_name == "StockChanged"
