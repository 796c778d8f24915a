"""Application service: Cancel Order use case.

Gives back every batch deduction recorded on the order, then deletes
the order — all in one unit of work.  Restoration works from the
order's own records, not from the ledger's current batch layout.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pantry.domain.clock import utc_now
from pantry.domain.exceptions import EntityNotFoundError
from pantry.domain.repository.unit_of_work import UnitOfWork
from pantry.domain.service.history_recorder import HistoryRecorder
from pantry.domain.service.stock_deduction_service import StockDeductionService

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, order_id: int) -> None:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            svc = StockDeductionService(uow.ingredients, self._clock)
            changes = svc.restore_for_order(order)

            recorder = HistoryRecorder(uow.history, self._clock)
            for ingredient, movements in changes.by_ingredient():
                recorder.record(ingredient, movements, reference_id=order.id)

            uow.orders.delete(order.id)  # type: ignore[arg-type]
            uow.commit()

        logger.info(
            "Order #%s cancelled: %d of %d batch deductions restored",
            order_id, len(changes.used), len(order.ingredients_used),
        )
