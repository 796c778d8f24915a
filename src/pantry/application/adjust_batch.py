"""Application service: Adjust Batch and Discard Batch use cases.

Manual corrections to a single batch.  Setting a quantity to zero, or
discarding the batch, prunes it from the ledger.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal

from pantry.application.dto import IngredientDTO, ingredient_to_dto
from pantry.domain.clock import utc_now
from pantry.domain.exceptions import EntityNotFoundError
from pantry.domain.repository.unit_of_work import UnitOfWork
from pantry.domain.service.history_recorder import HistoryRecorder


class AdjustBatchHandler:

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
        batch_id: str,
        quantity: str | int | float | Decimal | None = None,
        expiry_date: str | date | datetime | None = None,
    ) -> IngredientDTO:
        """Set a batch's quantity and/or expiry date.

        A history entry is written only if the quantity changed.
        """
        with self._uow as uow:
            ingredient = uow.ingredients.get_by_id(ingredient_id)
            if ingredient is None:
                raise EntityNotFoundError(f"Ingredient '{ingredient_id}' not found")

            movement = ingredient.adjust_batch(batch_id, quantity, expiry_date)
            uow.ingredients.save(ingredient)
            HistoryRecorder(uow.history, self._clock).record(ingredient, [movement])
            uow.commit()

        return ingredient_to_dto(ingredient)


class DiscardBatchHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, ingredient_id: str, batch_id: str) -> IngredientDTO:
        """Write off a batch as expired."""
        with self._uow as uow:
            ingredient = uow.ingredients.get_by_id(ingredient_id)
            if ingredient is None:
                raise EntityNotFoundError(f"Ingredient '{ingredient_id}' not found")

            movement = ingredient.discard_batch(batch_id)
            uow.ingredients.save(ingredient)
            HistoryRecorder(uow.history, self._clock).record(ingredient, [movement])
            uow.commit()

        return ingredient_to_dto(ingredient)
