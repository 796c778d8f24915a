"""Application service: Fulfill Order use case.

Orchestrates the domain service (FIFO stock deduction), the Order
aggregate and the history recorder inside one unit of work, so a menu
order either takes effect completely or not at all.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pantry.application.dto import OrderDTO, order_to_dto
from pantry.domain.clock import utc_now
from pantry.domain.exceptions import EntityNotFoundError
from pantry.domain.model.order import Order, validate_order_quantity
from pantry.domain.repository.unit_of_work import UnitOfWork
from pantry.domain.service.history_recorder import HistoryRecorder
from pantry.domain.service.stock_deduction_service import StockDeductionService

logger = logging.getLogger(__name__)


class FulfillOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, menu_id: int, quantity: int) -> OrderDTO:
        """Deduct stock for *quantity* servings of a menu and record the order.

        Steps:
        1. Load the menu (fail if not found).
        2. Deduct every requirement FIFO-wise (all-or-nothing).
        3. Create the Order with the batch-level deductions.
        4. Record one history entry per batch touched.
        5. Commit everything at once.
        """
        validate_order_quantity(quantity)

        with self._uow as uow:
            menu = uow.menus.get_by_id(menu_id)
            if menu is None:
                raise EntityNotFoundError(f"Menu #{menu_id} not found")

            svc = StockDeductionService(uow.ingredients, self._clock)
            changes = svc.deduct_for_menu(menu, quantity)

            order = Order.create(
                menu_id=menu.id,  # type: ignore[arg-type]
                menu_name=menu.name,
                quantity=quantity,
                ingredients_used=changes.used,
                now=self._clock(),
            )
            uow.orders.save(order)

            recorder = HistoryRecorder(uow.history, self._clock)
            for ingredient, movements in changes.by_ingredient():
                recorder.record(ingredient, movements, reference_id=order.id)

            uow.commit()

        logger.info(
            "Order #%s fulfilled: %d x %s (%d batch deductions)",
            order.id, quantity, menu.name, len(changes.used),
        )
        return order_to_dto(order)
