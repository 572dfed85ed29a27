"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from doughshop.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Reserve and return the next unique order ID.

        Two calls never return the same ID, even if no order is saved in
        between and even across processes sharing one store.
        """

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, oldest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist *order* if the stored copy is unchanged since it was read.

        A new order (``version`` 0) must not reuse a stored ID.  An existing
        order's stored version must equal ``order.version``.  Either mismatch
        raises ConcurrentModificationError and writes nothing.  On success
        ``order.version`` is incremented.
        """

    def list_by_customer(self, customer_id: str) -> list[Order]:
        return [o for o in self.list_all() if o.customer_id == customer_id]
