"""Application service: Remove From Cart use case."""

from __future__ import annotations

from doughshop.application.dto import CartDTO, cart_to_dto
from doughshop.domain.repository.cart_repository import CartRepository


class RemoveFromCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, customer_key: str, line_id: str) -> CartDTO:
        cart = self._cart_repo.get(customer_key)
        cart.remove_line(line_id)
        self._cart_repo.save(cart)
        return cart_to_dto(cart)
