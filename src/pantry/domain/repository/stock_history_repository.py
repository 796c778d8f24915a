"""Abstract repository for the append-only stock history."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pantry.domain.model.stock_history import StockHistoryEntry
from pantry.domain.model.value_objects import MovementType


class StockHistoryRepository(ABC):

    @abstractmethod
    def append(self, entry: StockHistoryEntry) -> None:
        """Append one immutable history entry."""

    @abstractmethod
    def find(
        self,
        ingredient_id: str | None = None,
        type: MovementType | None = None,
    ) -> list[StockHistoryEntry]:
        """Return matching entries in the order they were appended."""
