"""Application service: Adjust Stock use case (admin correction)."""

from __future__ import annotations

from doughshop.application.dto import StockLineDTO, stock_to_dto
from doughshop.domain.exceptions import EntityNotFoundError
from doughshop.domain.repository.product_repository import ProductRepository
from doughshop.domain.service.inventory_ledger import InventoryLedger


class AdjustStockHandler:

    def __init__(self, ledger: InventoryLedger, product_repo: ProductRepository) -> None:
        self._ledger = ledger
        self._product_repo = product_repo

    def handle(self, product_id: str, delta: int = 0, reconcile: bool = False) -> StockLineDTO:
        """Add (or with a negative *delta*, remove) units from current stock.

        With ``reconcile`` the record is instead restored to
        ``daily_limit - sold_today``.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        if reconcile:
            record = self._ledger.reconcile(product_id)
        else:
            record = self._ledger.adjust_stock(product_id, delta)
        return stock_to_dto(record, product.name)
