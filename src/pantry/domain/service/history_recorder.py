"""Domain service: History Recorder.

Turns the ``StockMovement``s returned by ledger mutations into
immutable ``StockHistoryEntry`` records and appends them to the history
repository of the current unit of work, so the audit trail commits or
rolls back together with the ledger change it describes.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from datetime import datetime

from pantry.domain.model.ingredient import Ingredient
from pantry.domain.model.stock_history import StockHistoryEntry, StockMovement
from pantry.domain.repository.stock_history_repository import StockHistoryRepository


class HistoryRecorder:

    def __init__(
        self,
        history_repo: StockHistoryRepository,
        clock: Callable[[], datetime],
    ) -> None:
        self._history_repo = history_repo
        self._clock = clock

    def record(
        self,
        ingredient: Ingredient,
        movements: Iterable[StockMovement | None],
        reference_id: int | None = None,
    ) -> list[StockHistoryEntry]:
        """Append one entry per movement; ``None`` movements are skipped."""
        timestamp = self._clock()
        entries: list[StockHistoryEntry] = []
        for movement in movements:
            if movement is None:
                continue
            entry = StockHistoryEntry(
                id=uuid.uuid4().hex,
                type=movement.type,
                ingredient_id=ingredient.id,
                ingredient_name=ingredient.name,
                batch_id=movement.batch_id,
                quantity=movement.quantity,
                previous_stock=movement.previous_stock,
                new_stock=movement.new_stock,
                reason=movement.reason,
                timestamp=timestamp,
                reference_id=reference_id,
            )
            self._history_repo.append(entry)
            entries.append(entry)
        return entries
