"""Application service: Show Order use case (query)."""

from __future__ import annotations

from doughshop.application.dto import OrderDTO, order_to_dto
from doughshop.domain.exceptions import EntityNotFoundError
from doughshop.domain.model.identity import Actor
from doughshop.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int, actor: Actor) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        # Customers only ever see their own orders.
        if order is None or (not actor.is_admin and order.customer_id != actor.customer_id):
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)
