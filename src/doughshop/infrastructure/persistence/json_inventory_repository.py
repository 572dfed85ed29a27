"""JSON-file-backed implementation of InventoryRepository."""

from __future__ import annotations

from pathlib import Path
from typing import ContextManager

from doughshop.domain.exceptions import ConcurrentModificationError
from doughshop.domain.model.inventory import StockRecord
from doughshop.domain.repository.inventory_repository import InventoryRepository
from doughshop.infrastructure.persistence.json_file import JsonFile


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- InventoryRepository interface ----------------------------------------

    def get_by_product_id(self, product_id: str) -> StockRecord | None:
        for raw in self._file.read():
            if raw["product_id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[StockRecord]:
        return [self._to_domain(raw) for raw in self._file.read()]

    def locked(self) -> ContextManager[None]:
        return self._file.locked()

    def save(self, record: StockRecord) -> None:
        with self._file.locked():
            records = self._file.read()
            index = None
            for i, raw in enumerate(records):
                if raw["product_id"] == record.product_id:
                    index = i
                    break

            stored_version = records[index].get("version", 0) if index is not None else 0
            if stored_version != record.version:
                raise ConcurrentModificationError(
                    f"Stock record for '{record.product_id}' changed "
                    f"(expected version {record.version}, found {stored_version})"
                )

            raw = self._to_raw(record)
            raw["version"] = record.version + 1
            if index is None:
                records.append(raw)
            else:
                records[index] = raw
            self._file.write(records)
            record.version += 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: StockRecord) -> dict:
        return {
            "product_id": record.product_id,
            "daily_limit": record.daily_limit,
            "current_stock": record.current_stock,
            "sold_today": record.sold_today,
            "version": record.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockRecord:
        return StockRecord(
            product_id=raw["product_id"],
            daily_limit=raw["daily_limit"],
            current_stock=raw["current_stock"],
            sold_today=raw.get("sold_today", 0),
            version=raw.get("version", 0),
        )
