"""Domain service: Inventory Ledger.

The ledger is the only owner of stock numbers.  It serializes every
mutation per product id with an in-process lock.  For the whole
read-check-write it also holds the repository's store lock, which other
processes sharing the store take too.  Saves go through the
update-if-unchanged ``save``, so a stale writer fails instead of
overwriting.

Multi-product sales (``commit_order``) take the locks of every affected
product in sorted order, re-validate under the locks and only then mutate.
Two checkouts racing for the last unit therefore cannot both succeed.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterable, Iterator

import structlog

from doughshop.domain.bus import EventPublisher, NullPublisher
from doughshop.domain.events import LowStockDetected, StockChanged
from doughshop.domain.exceptions import (
    EntityNotFoundError,
    OversellRejected,
    ValidationError,
)
from doughshop.domain.model.inventory import StockRecord, StockStatus
from doughshop.domain.repository.inventory_repository import InventoryRepository
from doughshop.domain.repository.product_repository import ProductRepository
from doughshop.domain.service.keyed_locks import KeyedLocks

logger = structlog.get_logger(__name__)


class InventoryLedger:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        product_repo: ProductRepository,
        publisher: EventPublisher | None = None,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._product_repo = product_repo
        self._publisher = publisher or NullPublisher()
        self._locks = KeyedLocks()

    # --- Single-product commands ----------------------------------------------

    def set_daily_limit(self, product_id: str, new_limit: int) -> StockRecord:
        with self._locked([product_id]):
            record = self._load(product_id)
            record.set_daily_limit(new_limit)
            self._inventory_repo.save(record)
        logger.info(
            "stock.limit_set",
            product_id=product_id,
            daily_limit=new_limit,
            current_stock=record.current_stock,
        )
        self._announce(record)
        return record

    def commit_sale(self, product_id: str, quantity: int) -> StockRecord:
        """Decrement stock by *quantity*; InsufficientStockError leaves it untouched."""
        with self._locked([product_id]):
            record = self._load(product_id)
            record.commit_sale(quantity)
            self._inventory_repo.save(record)
        logger.info("stock.committed", product_id=product_id, quantity=quantity)
        self._announce(record)
        return record

    def revert_sale(self, product_id: str, quantity: int) -> StockRecord:
        with self._locked([product_id]):
            record = self._load(product_id)
            record.revert_sale(quantity)
            self._inventory_repo.save(record)
        logger.info("stock.reverted", product_id=product_id, quantity=quantity)
        self._announce(record)
        return record

    def adjust_stock(self, product_id: str, delta: int) -> StockRecord:
        with self._locked([product_id]):
            record = self._load(product_id)
            record.adjust(delta)
            self._inventory_repo.save(record)
        logger.info(
            "stock.adjusted",
            product_id=product_id,
            delta=delta,
            current_stock=record.current_stock,
        )
        self._announce(record)
        return record

    def reconcile(self, product_id: str) -> StockRecord:
        with self._locked([product_id]):
            record = self._load(product_id)
            if not record.is_reconciled:
                record.reconcile()
                self._inventory_repo.save(record)
                logger.info(
                    "stock.reconciled",
                    product_id=product_id,
                    current_stock=record.current_stock,
                )
        self._announce(record)
        return record

    # --- Multi-product commands -----------------------------------------------

    def commit_order(
        self,
        quantities: dict[str, int],
        on_committed: Callable[[], None] | None = None,
    ) -> None:
        """Validate and commit several products as one serialized operation.

        Raises OversellRejected for the first short product (in product id
        order) without mutating anything.  ``on_committed`` runs while the
        locks are still held; if it or any save fails, every product
        already committed is re-credited before the error propagates.
        """
        self._check_quantities(quantities)
        with self._locked(quantities):
            records = {pid: self._load(pid) for pid in sorted(quantities)}
            for pid, record in records.items():
                if quantities[pid] > record.current_stock:
                    logger.info(
                        "stock.oversell_rejected",
                        product_id=pid,
                        requested=quantities[pid],
                        available=record.current_stock,
                    )
                    raise OversellRejected(pid, quantities[pid], record.current_stock)

            committed: list[StockRecord] = []
            try:
                for pid, record in records.items():
                    record.commit_sale(quantities[pid])
                    self._inventory_repo.save(record)
                    committed.append(record)
                if on_committed is not None:
                    on_committed()
            except Exception:
                logger.exception(
                    "stock.commit_rolled_back",
                    products=[r.product_id for r in committed],
                )
                for record in committed:
                    record.revert_sale(quantities[record.product_id])
                    self._inventory_repo.save(record)
                raise

        logger.info("stock.order_committed", quantities=quantities)
        for record in records.values():
            self._announce(record)

    def revert_order(self, quantities: dict[str, int]) -> None:
        self._check_quantities(quantities)
        with self._locked(quantities):
            records = [self._load(pid) for pid in sorted(quantities)]
            for record in records:
                record.revert_sale(quantities[record.product_id])
                self._inventory_repo.save(record)
        logger.info("stock.order_reverted", quantities=quantities)
        for record in records:
            self._announce(record)

    def reset_day(self) -> dict[str, int]:
        """Start a new business day for every product.

        Returns the ``sold_today`` figures that were cleared, for reporting.
        """
        product_ids = self._known_product_ids()
        sold: dict[str, int] = {}
        with self._locked(product_ids):
            records = [self._load(pid) for pid in sorted(product_ids)]
            for record in records:
                sold[record.product_id] = record.reset_day()
                self._inventory_repo.save(record)
        logger.info("stock.day_reset", sold=sold)
        for record in records:
            self._announce(record)
        return sold

    # --- Queries --------------------------------------------------------------

    def get_record(self, product_id: str) -> StockRecord:
        with self._locked([product_id]):
            return self._load(product_id)

    def get_available(self, product_id: str) -> int:
        return self.get_record(product_id).current_stock

    def is_available(self, product_id: str, quantity: int = 1) -> bool:
        return self.get_available(product_id) >= quantity

    def stock_status(self, product_id: str) -> StockStatus:
        return self.get_record(product_id).status

    def low_stock_products(self) -> set[str]:
        """Products at or below the low-stock ratio; zero limits are excluded."""
        return {r.product_id for r in self._inventory_repo.list_all() if r.is_low}

    def list_records(self) -> list[StockRecord]:
        """One record per known product, including never-touched catalog items."""
        return [self.get_record(pid) for pid in sorted(self._known_product_ids())]

    # --- Internal helpers -----------------------------------------------------

    def _load(self, product_id: str) -> StockRecord:
        record = self._inventory_repo.get_by_product_id(product_id)
        if record is not None:
            return record
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        return StockRecord.fresh(product_id, product.default_daily_limit)

    def _known_product_ids(self) -> set[str]:
        ids = {p.id for p in self._product_repo.list_all()}
        ids.update(r.product_id for r in self._inventory_repo.list_all())
        return ids

    @contextmanager
    def _locked(self, product_ids: Iterable[str]) -> Iterator[None]:
        with self._locks.hold(product_ids), self._inventory_repo.locked():
            yield

    @staticmethod
    def _check_quantities(quantities: dict[str, int]) -> None:
        if not quantities:
            raise ValidationError("No products to commit")
        for pid, qty in quantities.items():
            if qty <= 0:
                raise ValidationError(f"Quantity for product '{pid}' must be positive")

    def _announce(self, record: StockRecord) -> None:
        self._publisher.publish(
            StockChanged(
                aggregate_id=record.product_id,
                current_stock=record.current_stock,
                daily_limit=record.daily_limit,
                sold_today=record.sold_today,
            )
        )
        if record.is_low:
            self._publisher.publish(
                LowStockDetected(
                    aggregate_id=record.product_id,
                    current_stock=record.current_stock,
                    daily_limit=record.daily_limit,
                )
            )
