"""Abstract repository for Cart aggregate, one cart per session key."""

from __future__ import annotations

from abc import ABC, abstractmethod

from doughshop.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get(self, customer_key: str) -> Cart:
        """Return the cart for *customer_key*, empty if none was saved."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist the cart, replacing any previous contents."""
