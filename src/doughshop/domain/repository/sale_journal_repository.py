"""Abstract repository for committed-sale journal entries."""

from __future__ import annotations

from abc import ABC, abstractmethod

from doughshop.domain.model.inventory import SaleJournalEntry


class SaleJournalRepository(ABC):

    @abstractmethod
    def append(self, entry: SaleJournalEntry) -> None:
        """Record a sale that has just been committed to the ledger."""

    @abstractmethod
    def settle(self, order_id: int) -> None:
        """Mark the entry for *order_id* as settled."""

    @abstractmethod
    def list_unsettled(self) -> list[SaleJournalEntry]:
        """Return entries whose order has not been confirmed as saved."""
