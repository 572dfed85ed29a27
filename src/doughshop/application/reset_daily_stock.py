"""Application service: Reset Daily Stock use case.

Starts a new business day: every product's stock goes back to its daily
limit and today's sales are cleared.  Run explicitly by staff or by a
scheduler; nothing resets automatically.
"""

from __future__ import annotations

import structlog

from doughshop.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)


class ResetDailyStockHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(self) -> dict[str, int]:
        """Reset every product and return yesterday's units sold per product."""
        sold = self._ledger.reset_day()
        logger.info("inventory.daily_reset", total_sold=sum(sold.values()))
        return sold
