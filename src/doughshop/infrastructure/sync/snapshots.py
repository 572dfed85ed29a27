"""Snapshot sources for the replicas: plain, JSON-friendly dicts."""

from __future__ import annotations

from typing import Callable, Iterable

from doughshop.domain.model.inventory import StockRecord
from doughshop.domain.repository.inventory_repository import InventoryRepository
from doughshop.domain.repository.order_repository import OrderRepository
from doughshop.domain.service.inventory_ledger import InventoryLedger
from doughshop.infrastructure.sync.replica import Snapshot


def _stock_view(records: Iterable[StockRecord]) -> Snapshot:
    return {
        record.product_id: {
            "daily_limit": record.daily_limit,
            "current_stock": record.current_stock,
            "sold_today": record.sold_today,
            "status": record.status.value,
        }
        for record in records
    }


def inventory_snapshot(ledger: InventoryLedger) -> Callable[[], Snapshot]:
    """Every catalog product's stock, read through the ledger."""
    return lambda: _stock_view(ledger.list_records())


def stored_inventory_snapshot(inventory_repo: InventoryRepository) -> Callable[[], Snapshot]:
    """Only the stored stock records, read straight from the store without locks."""
    return lambda: _stock_view(inventory_repo.list_all())


def order_status_snapshot(
    order_repo: OrderRepository, customer_id: str | None = None
) -> Callable[[], Snapshot]:
    """``order_id -> status`` for one customer, or for everyone."""

    def read() -> Snapshot:
        if customer_id is None:
            orders = order_repo.list_all()
        else:
            orders = order_repo.list_by_customer(customer_id)
        return {str(o.id): o.status.value for o in orders}

    return read
