"""Stock history — the audit trail of every stock-affecting mutation.

History is derived from ledger mutations and never read back to
reconstruct ledger state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pantry.domain.model.value_objects import MovementType, StockReason


@dataclass(frozen=True)
class StockMovement:
    """What a single batch-level mutation did to the ledger.

    Produced by the ``Ingredient`` aggregate; turned into a
    ``StockHistoryEntry`` by the history recorder.
    """

    batch_id: str
    type: MovementType
    quantity: Decimal
    previous_stock: Decimal
    new_stock: Decimal
    reason: StockReason


@dataclass(frozen=True)
class StockHistoryEntry:
    id: str
    type: MovementType
    ingredient_id: str
    ingredient_name: str
    batch_id: str
    quantity: Decimal
    previous_stock: Decimal
    new_stock: Decimal
    reason: StockReason
    timestamp: datetime
    reference_id: int | None = None  # order id for order / order_cancellation
