"""Integration tests for the admin stock use cases."""

import pytest

from doughshop.application.adjust_stock import AdjustStockHandler
from doughshop.application.reset_daily_stock import ResetDailyStockHandler
from doughshop.application.set_daily_limit import SetDailyLimitHandler
from doughshop.application.show_inventory import ShowInventoryHandler
from doughshop.domain.exceptions import EntityNotFoundError, ValidationError
from doughshop.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import FakeInventoryRepository, FakeProductRepository, make_product


def _setup():
    products = FakeProductRepository(
        [make_product("A"), make_product("P", name="Party Set (50 pcs)", price="450.00")]
    )
    ledger = InventoryLedger(FakeInventoryRepository(), products)
    return ledger, products


class TestShowInventory:

    def test_lists_every_product(self):
        ledger, products = _setup()
        lines = ShowInventoryHandler(ledger, products).handle()
        assert [(line.product_id, line.daily_limit, line.status) for line in lines] == [
            ("A", 20, "good"),
            ("P", 10, "good"),
        ]

    def test_low_only(self):
        ledger, products = _setup()
        ledger.commit_sale("P", 9)
        lines = ShowInventoryHandler(ledger, products).handle(low_only=True)
        assert [line.product_id for line in lines] == ["P"]
        assert lines[0].low


class TestSetDailyLimit:

    def test_set_limit(self):
        ledger, products = _setup()
        line = SetDailyLimitHandler(ledger, products).handle("A", 35)
        assert line.daily_limit == 35
        assert line.current_stock == 35

    def test_negative_limit_rejected(self):
        ledger, products = _setup()
        with pytest.raises(ValidationError):
            SetDailyLimitHandler(ledger, products).handle("A", -1)

    def test_unknown_product(self):
        ledger, products = _setup()
        with pytest.raises(EntityNotFoundError):
            SetDailyLimitHandler(ledger, products).handle("Z", 5)


class TestAdjustStock:

    def test_delta(self):
        ledger, products = _setup()
        assert AdjustStockHandler(ledger, products).handle("A", delta=-4).current_stock == 16

    def test_reconcile(self):
        ledger, products = _setup()
        ledger.commit_sale("A", 5)
        ledger.adjust_stock("A", -10)
        line = AdjustStockHandler(ledger, products).handle("A", reconcile=True)
        assert line.current_stock == 15


class TestResetDailyStock:

    def test_reset(self):
        ledger, products = _setup()
        ledger.commit_order({"A": 3, "P": 2})
        sold = ResetDailyStockHandler(ledger).handle()
        assert sold == {"A": 3, "P": 2}
        assert ledger.get_available("A") == 20
        assert ledger.get_available("P") == 10
