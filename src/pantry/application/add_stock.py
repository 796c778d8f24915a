"""Application service: Add Stock use case."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal

from pantry.application.dto import IngredientDTO, ingredient_to_dto
from pantry.domain.clock import utc_now
from pantry.domain.exceptions import EntityNotFoundError
from pantry.domain.repository.unit_of_work import UnitOfWork
from pantry.domain.service.history_recorder import HistoryRecorder

logger = logging.getLogger(__name__)


class AddStockHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow = uow
        self._clock = clock

    def handle(
        self,
        ingredient_id: str,
        quantity: str | int | float | Decimal,
        expiry_date: str | date | datetime,
    ) -> IngredientDTO:
        """Receive stock into a new batch, or top up a same-day batch."""
        with self._uow as uow:
            ingredient = uow.ingredients.get_by_id(ingredient_id)
            if ingredient is None:
                raise EntityNotFoundError(f"Ingredient '{ingredient_id}' not found")

            movement = ingredient.add_stock(quantity, expiry_date, self._clock())
            uow.ingredients.save(ingredient)
            HistoryRecorder(uow.history, self._clock).record(ingredient, [movement])
            uow.commit()

        logger.info(
            "Stock in: %s %s of %s into batch %s (%s)",
            movement.quantity, ingredient.unit, ingredient.name,
            movement.batch_id, movement.reason.value,
        )
        return ingredient_to_dto(ingredient)
