"""Application service: Set Daily Limit use case (admin)."""

from __future__ import annotations

from doughshop.application.dto import StockLineDTO, stock_to_dto
from doughshop.domain.exceptions import EntityNotFoundError
from doughshop.domain.repository.product_repository import ProductRepository
from doughshop.domain.service.inventory_ledger import InventoryLedger


class SetDailyLimitHandler:

    def __init__(self, ledger: InventoryLedger, product_repo: ProductRepository) -> None:
        self._ledger = ledger
        self._product_repo = product_repo

    def handle(self, product_id: str, daily_limit: int) -> StockLineDTO:
        """Replace the product's daily limit.

        A cut applies immediately, even against units already sold today:
        current stock becomes ``max(0, limit - sold_today)``.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        record = self._ledger.set_daily_limit(product_id, daily_limit)
        return stock_to_dto(record, product.name)
