"""Application service: Reconcile Sales use case.

Settles the sale journal after a checkout failed between committing stock
and saving the order.  For each unsettled entry:

- an order with that id exists → the entry is just marked settled;
- no such order, and the entry is older than the grace period → its
  quantities are re-credited to the ledger, then the entry is settled;
- no such order yet, but the entry is recent → it is left alone.  The
  checkout that wrote it may still be saving its order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

import structlog

from doughshop.domain.repository.order_repository import OrderRepository
from doughshop.domain.repository.sale_journal_repository import SaleJournalRepository
from doughshop.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)

DEFAULT_GRACE = timedelta(seconds=60)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ReconcileResult:
    settled: list[int] = field(default_factory=list)
    compensated: list[int] = field(default_factory=list)
    in_flight: list[int] = field(default_factory=list)


class ReconcileSalesHandler:

    def __init__(
        self,
        journal_repo: SaleJournalRepository,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        grace: timedelta = DEFAULT_GRACE,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._journal_repo = journal_repo
        self._order_repo = order_repo
        self._ledger = ledger
        self._grace = grace
        self._clock = clock

    def handle(self) -> ReconcileResult:
        result = ReconcileResult()
        cutoff = self._clock() - self._grace
        for entry in self._journal_repo.list_unsettled():
            if self._order_repo.get_by_id(entry.order_id) is not None:
                result.settled.append(entry.order_id)
            elif entry.committed_at > cutoff:
                result.in_flight.append(entry.order_id)
                logger.info("sales.entry_in_flight", order_id=entry.order_id)
                continue
            else:
                self._ledger.revert_order(entry.quantities)
                result.compensated.append(entry.order_id)
                logger.warning(
                    "sales.compensated",
                    order_id=entry.order_id,
                    quantities=entry.quantities,
                )
            self._journal_repo.settle(entry.order_id)
        logger.info(
            "sales.reconciled",
            settled=len(result.settled),
            compensated=len(result.compensated),
            in_flight=len(result.in_flight),
        )
        return result
