"""Abstract repository for the product catalog.

The catalog is owned elsewhere.  This project reads it, seeds an empty
store once, and switches customization options on and off.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from doughshop.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return the catalog entry for *product_id*, or None."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every catalog entry in catalog order."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Insert or replace a catalog entry (seeding, option availability)."""
