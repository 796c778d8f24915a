"""Application service: Create Ingredient use case."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal

from pantry.application.dto import IngredientDTO, ingredient_to_dto
from pantry.domain.clock import utc_now
from pantry.domain.exceptions import ValidationError
from pantry.domain.model.ingredient import Ingredient
from pantry.domain.repository.unit_of_work import UnitOfWork
from pantry.domain.service.history_recorder import HistoryRecorder


class CreateIngredientHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow = uow
        self._clock = clock

    def handle(
        self,
        name: str,
        unit: str,
        category: str,
        quantity: str | int | float | Decimal | None = None,
        expiry_date: str | date | datetime | None = None,
    ) -> IngredientDTO:
        """Add a new ingredient, optionally with its first batch of stock."""
        if (quantity is None) != (expiry_date is None):
            raise ValidationError("Initial stock needs both a quantity and an expiry date")

        with self._uow as uow:
            ingredient = Ingredient.create(name, unit, category, now=self._clock())

            if uow.ingredients.get_by_name(ingredient.name) is not None:
                raise ValidationError(f"Ingredient '{ingredient.name}' already exists")

            if quantity is not None:
                movement = ingredient.add_stock(quantity, expiry_date, self._clock())  # type: ignore[arg-type]
                HistoryRecorder(uow.history, self._clock).record(ingredient, [movement])

            uow.ingredients.save(ingredient)
            uow.commit()

        return ingredient_to_dto(ingredient)
