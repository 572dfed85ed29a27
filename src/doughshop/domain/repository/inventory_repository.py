"""Abstract repository for StockRecord aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import nullcontext
from typing import ContextManager

from doughshop.domain.model.inventory import StockRecord


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_product_id(self, product_id: str) -> StockRecord | None:
        """Return the stock record for a product, or None."""

    @abstractmethod
    def list_all(self) -> list[StockRecord]:
        """Return every stock record."""

    @abstractmethod
    def save(self, record: StockRecord) -> None:
        """Persist *record* if the stored copy is unchanged since it was read.

        The stored version must equal ``record.version`` (0 for a record that
        was never saved); otherwise ConcurrentModificationError is raised and
        nothing is written.  On success ``record.version`` is incremented.
        """

    def locked(self) -> ContextManager[None]:
        """Hold the whole store for a read-check-write sequence.

        Stores shared between processes override this.  The default adds
        nothing to the caller's in-process locking.
        """
        return nullcontext()
