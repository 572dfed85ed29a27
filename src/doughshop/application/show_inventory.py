"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from doughshop.application.dto import StockLineDTO, stock_to_dto
from doughshop.domain.repository.product_repository import ProductRepository
from doughshop.domain.service.inventory_ledger import InventoryLedger


class ShowInventoryHandler:

    def __init__(self, ledger: InventoryLedger, product_repo: ProductRepository) -> None:
        self._ledger = ledger
        self._product_repo = product_repo

    def handle(self, low_only: bool = False) -> list[StockLineDTO]:
        names = {p.id: p.name for p in self._product_repo.list_all()}
        lines = [
            stock_to_dto(record, names.get(record.product_id, record.product_id))
            for record in self._ledger.list_records()
        ]
        if low_only:
            low = self._ledger.low_stock_products()
            lines = [line for line in lines if line.product_id in low]
        return lines
