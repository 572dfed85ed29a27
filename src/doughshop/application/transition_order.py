"""Application service: Transition Order use case.

Staff move orders forward through the status graph.  A transition to
``cancelled`` is handed to CancelOrderHandler so stock is reverted.
"""

from __future__ import annotations

import structlog

from doughshop.application.cancel_order import CancelOrderHandler
from doughshop.application.dto import OrderDTO, order_to_dto
from doughshop.domain.bus import EventPublisher, NullPublisher
from doughshop.domain.events import OrderStatusChanged
from doughshop.domain.exceptions import EntityNotFoundError
from doughshop.domain.model.identity import Actor
from doughshop.domain.model.order import OrderStatus
from doughshop.domain.repository.order_repository import OrderRepository
from doughshop.domain.service.inventory_ledger import InventoryLedger
from doughshop.domain.service.keyed_locks import KeyedLocks

logger = structlog.get_logger(__name__)


class TransitionOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        publisher: EventPublisher | None = None,
        order_locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._publisher = publisher or NullPublisher()
        self._order_locks = order_locks or KeyedLocks()
        self._cancel = CancelOrderHandler(
            order_repo, ledger, self._publisher, self._order_locks
        )

    def handle(self, order_id: int, new_status: OrderStatus, actor: Actor) -> OrderDTO:
        if new_status is OrderStatus.CANCELLED:
            return self._cancel.handle(order_id, actor)

        with self._order_locks.hold([order_id]):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            old_status = order.status
            try:
                order.transition_to(new_status, actor)
            except Exception:
                logger.warning(
                    "order.transition_rejected",
                    order_id=order_id,
                    current_status=old_status.value,
                    new_status=new_status.value,
                    role=actor.role.value,
                )
                raise
            self._order_repo.save(order)

        logger.info(
            "order.status_updated",
            order_id=order_id,
            old_status=old_status.value,
            new_status=new_status.value,
        )
        self._publisher.publish(
            OrderStatusChanged(
                aggregate_id=str(order.id),
                old_status=old_status.value,
                new_status=new_status.value,
                role=actor.role.value,
            )
        )
        return order_to_dto(order)
