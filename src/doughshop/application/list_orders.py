"""Application service: List Orders use case (query).

Customers get their own order history; admins get every order,
optionally filtered by status.  Both views are split into active orders
and completed ones (delivered or cancelled), newest first.
"""

from __future__ import annotations

from doughshop.application.dto import OrderHistoryDTO, order_to_dto
from doughshop.domain.model.identity import Actor
from doughshop.domain.model.order import OrderStatus
from doughshop.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, actor: Actor, status: OrderStatus | None = None) -> OrderHistoryDTO:
        if actor.is_admin:
            orders = self._order_repo.list_all()
        else:
            orders = self._order_repo.list_by_customer(actor.customer_id)

        if status is not None:
            orders = [o for o in orders if o.status is status]

        orders = sorted(orders, key=lambda o: o.created_at, reverse=True)
        return OrderHistoryDTO(
            active=[order_to_dto(o) for o in orders if o.is_active],
            completed=[order_to_dto(o) for o in orders if not o.is_active],
        )
