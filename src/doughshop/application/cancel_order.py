"""Application service: Cancel Order use case.

The only path that returns stock to the ledger.  The order is locked for
the whole operation so two concurrent cancellations cannot both revert
its stock.  Across processes the order's versioned save does the same
job: the second cancellation fails with ConcurrentModificationError
before it reaches the ledger.
"""

from __future__ import annotations

import structlog

from doughshop.application.dto import OrderDTO, order_to_dto
from doughshop.domain.bus import EventPublisher, NullPublisher
from doughshop.domain.events import OrderCancelled, OrderStatusChanged
from doughshop.domain.exceptions import EntityNotFoundError
from doughshop.domain.model.identity import Actor
from doughshop.domain.repository.order_repository import OrderRepository
from doughshop.domain.service.inventory_ledger import InventoryLedger
from doughshop.domain.service.keyed_locks import KeyedLocks

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        publisher: EventPublisher | None = None,
        order_locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._publisher = publisher or NullPublisher()
        self._order_locks = order_locks or KeyedLocks()

    def handle(self, order_id: int, actor: Actor) -> OrderDTO:
        with self._order_locks.hold([order_id]):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            log = logger.bind(order_id=order_id, role=actor.role.value)
            old_status = order.status

            # Validates terminal state and role rules before anything changes.
            order.cancel(actor)
            self._order_repo.save(order)

            # Saved first: if the revert fails the stock is under-credited,
            # never double-credited.
            try:
                self._ledger.revert_order(order.quantities_by_product())
            except Exception:
                log.error("order.cancel_stock_revert_failed", exc_info=True)
                raise

        log.info("order.cancelled", old_status=old_status.value)
        self._publisher.publish(
            OrderStatusChanged(
                aggregate_id=str(order.id),
                old_status=old_status.value,
                new_status=order.status.value,
                role=actor.role.value,
            )
        )
        self._publisher.publish(
            OrderCancelled(aggregate_id=str(order.id), cancelled_by=actor.role.value)
        )
        return order_to_dto(order)
