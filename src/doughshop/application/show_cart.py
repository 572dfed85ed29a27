"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from doughshop.application.dto import CartDTO, cart_to_dto
from doughshop.domain.repository.cart_repository import CartRepository


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, customer_key: str) -> CartDTO:
        return cart_to_dto(self._cart_repo.get(customer_key))
