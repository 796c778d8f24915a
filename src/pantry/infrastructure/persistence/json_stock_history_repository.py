"""JSON-document-backed implementation of StockHistoryRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pantry.domain.model.stock_history import StockHistoryEntry
from pantry.domain.model.value_objects import MovementType, StockReason
from pantry.domain.repository.stock_history_repository import StockHistoryRepository
from pantry.infrastructure.persistence.json_store import ChangeSet


class JsonStockHistoryRepository(StockHistoryRepository):

    def __init__(self, state: dict, changes: ChangeSet) -> None:
        self._records: list[dict] = state["stock_history"]
        self._changes = changes

    def append(self, entry: StockHistoryEntry) -> None:
        self._records.append(self._to_raw(entry))
        self._changes.history_appended += 1

    def find(
        self,
        ingredient_id: str | None = None,
        type: MovementType | None = None,
    ) -> list[StockHistoryEntry]:
        return [
            self._to_domain(raw)
            for raw in self._records
            if (ingredient_id is None or raw["ingredient_id"] == ingredient_id)
            and (type is None or raw["type"] == type.value)
        ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(entry: StockHistoryEntry) -> dict:
        return {
            "id": entry.id,
            "type": entry.type.value,
            "ingredient_id": entry.ingredient_id,
            "ingredient_name": entry.ingredient_name,
            "batch_id": entry.batch_id,
            "quantity": str(entry.quantity),
            "previous_stock": str(entry.previous_stock),
            "new_stock": str(entry.new_stock),
            "reason": entry.reason.value,
            "reference_id": entry.reference_id,
            "timestamp": entry.timestamp.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockHistoryEntry:
        return StockHistoryEntry(
            id=raw["id"],
            type=MovementType(raw["type"]),
            ingredient_id=raw["ingredient_id"],
            ingredient_name=raw["ingredient_name"],
            batch_id=raw["batch_id"],
            quantity=Decimal(raw["quantity"]),
            previous_stock=Decimal(raw["previous_stock"]),
            new_stock=Decimal(raw["new_stock"]),
            reason=StockReason(raw["reason"]),
            reference_id=raw.get("reference_id"),
            timestamp=datetime.fromisoformat(raw["timestamp"]),
        )
