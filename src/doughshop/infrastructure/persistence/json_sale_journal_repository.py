"""JSON-file-backed implementation of SaleJournalRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from doughshop.domain.exceptions import EntityNotFoundError
from doughshop.domain.model.inventory import SaleJournalEntry
from doughshop.domain.repository.sale_journal_repository import SaleJournalRepository
from doughshop.infrastructure.persistence.json_file import JsonFile


class JsonSaleJournalRepository(SaleJournalRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def append(self, entry: SaleJournalEntry) -> None:
        with self._file.locked():
            entries = self._file.read()
            entries.append(self._to_raw(entry))
            self._file.write(entries)

    def settle(self, order_id: int) -> None:
        with self._file.locked():
            entries = self._file.read()
            for raw in entries:
                if raw["order_id"] == order_id:
                    raw["settled"] = True
                    break
            else:
                raise EntityNotFoundError(f"No journal entry for order #{order_id}")
            self._file.write(entries)

    def list_unsettled(self) -> list[SaleJournalEntry]:
        return [self._to_domain(raw) for raw in self._file.read() if not raw["settled"]]

    @staticmethod
    def _to_raw(entry: SaleJournalEntry) -> dict:
        return {
            "order_id": entry.order_id,
            "quantities": dict(entry.quantities),
            "committed_at": entry.committed_at.isoformat(),
            "settled": entry.settled,
        }

    @staticmethod
    def _to_domain(raw: dict) -> SaleJournalEntry:
        return SaleJournalEntry(
            order_id=raw["order_id"],
            quantities=dict(raw["quantities"]),
            committed_at=datetime.fromisoformat(raw["committed_at"]),
            settled=raw["settled"],
        )
