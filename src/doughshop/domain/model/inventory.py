"""StockRecord aggregate — per-product daily stock.

Each product has one StockRecord holding its daily limit, what is left to
sell today and what has been sold so far.  The ledger service serializes
access to these records; the methods here only enforce single-record rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from doughshop.domain.exceptions import InsufficientStockError, ValidationError

# Policy thresholds for stock tiers, as fractions of the daily limit.
LOW_STOCK_RATIO = 0.20
HALF_STOCK_RATIO = 0.50


class StockStatus(Enum):
    OUT = "out"
    CRITICAL = "critical"
    LOW = "low"
    GOOD = "good"
    UNKNOWN = "unknown"


@dataclass
class StockRecord:
    """Aggregate root for daily stock tracking.

    Invariants:
    - ``0 <= current_stock <= daily_limit``
    - ``sold_today >= 0``
    - ``current_stock + sold_today == daily_limit`` after reconciliation
      (limit edits and reverts may leave it transiently off)
    """

    product_id: str
    daily_limit: int
    current_stock: int
    sold_today: int = 0
    version: int = 0

    @staticmethod
    def fresh(product_id: str, daily_limit: int) -> StockRecord:
        return StockRecord(
            product_id=product_id,
            daily_limit=daily_limit,
            current_stock=daily_limit,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def stock_ratio(self) -> float | None:
        """``current_stock / daily_limit``, or None when the limit is zero."""
        if self.daily_limit <= 0:
            return None
        return self.current_stock / self.daily_limit

    @property
    def is_low(self) -> bool:
        ratio = self.stock_ratio
        return ratio is not None and ratio <= LOW_STOCK_RATIO

    @property
    def status(self) -> StockStatus:
        if self.daily_limit <= 0:
            return StockStatus.UNKNOWN
        if self.current_stock <= 0:
            return StockStatus.OUT
        ratio = self.current_stock / self.daily_limit
        if ratio <= LOW_STOCK_RATIO:
            return StockStatus.CRITICAL
        if ratio <= HALF_STOCK_RATIO:
            return StockStatus.LOW
        return StockStatus.GOOD

    @property
    def is_reconciled(self) -> bool:
        return self.current_stock + self.sold_today == self.daily_limit

    # --- Mutations ------------------------------------------------------------

    def set_daily_limit(self, new_limit: int) -> None:
        """Replace the limit; cuts apply immediately against today's sales."""
        if new_limit < 0:
            raise ValidationError("Daily limit cannot be negative")
        self.daily_limit = new_limit
        self.current_stock = max(0, new_limit - self.sold_today)

    def commit_sale(self, quantity: int) -> None:
        """Move *quantity* units from current stock to sold today (all or nothing)."""
        if quantity <= 0:
            raise ValidationError("Sale quantity must be positive")
        if quantity > self.current_stock:
            raise InsufficientStockError(self.product_id, quantity, self.current_stock)
        self.current_stock -= quantity
        self.sold_today += quantity

    def revert_sale(self, quantity: int) -> None:
        """Return *quantity* units to stock, e.g. on order cancellation.

        ``sold_today`` is clamped at zero and ``current_stock`` at the daily
        limit, so reverting more than was sold cannot break the bounds.
        """
        if quantity <= 0:
            raise ValidationError("Revert quantity must be positive")
        self.current_stock = min(self.daily_limit, self.current_stock + quantity)
        self.sold_today = max(0, self.sold_today - quantity)

    def adjust(self, delta: int) -> None:
        """Manual correction of current stock, clamped to ``[0, daily_limit]``."""
        self.current_stock = max(0, min(self.daily_limit, self.current_stock + delta))

    def reconcile(self) -> None:
        self.current_stock = max(0, self.daily_limit - self.sold_today)

    def reset_day(self) -> int:
        """Start a new business day; returns yesterday's ``sold_today``."""
        sold = self.sold_today
        self.sold_today = 0
        self.current_stock = self.daily_limit
        return sold


@dataclass
class SaleJournalEntry:
    """Record of a committed multi-product sale awaiting its order record.

    Written while the stock locks are held; settled once the order is saved
    or once reconciliation has re-credited the stock.
    """

    order_id: int
    quantities: dict[str, int]
    committed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    settled: bool = False
