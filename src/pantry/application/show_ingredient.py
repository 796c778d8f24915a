"""Application service: ingredient ledger queries.

Pure projections over the ledger — no business logic.
"""

from __future__ import annotations

from decimal import Decimal

from pantry.application.dto import BatchDTO, IngredientDTO, batch_to_dto, ingredient_to_dto
from pantry.domain.exceptions import EntityNotFoundError
from pantry.domain.model.ingredient import Ingredient
from pantry.domain.repository.unit_of_work import UnitOfWork


class ShowIngredientHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, ingredient_id: str) -> IngredientDTO:
        with self._uow as uow:
            return ingredient_to_dto(self._load(uow, ingredient_id))

    def list_batches(self, ingredient_id: str) -> list[BatchDTO]:
        """Non-empty batches in FIFO (expiry-ascending) order."""
        with self._uow as uow:
            return [batch_to_dto(b) for b in self._load(uow, ingredient_id).batches]

    def total_quantity(self, ingredient_id: str) -> Decimal:
        with self._uow as uow:
            return self._load(uow, ingredient_id).total_quantity

    @staticmethod
    def _load(uow: UnitOfWork, ingredient_id: str) -> Ingredient:
        ingredient = uow.ingredients.get_by_id(ingredient_id)
        if ingredient is None:
            raise EntityNotFoundError(f"Ingredient '{ingredient_id}' not found")
        # Stored data may predate pruning; never show empty batches.
        ingredient.normalize()
        return ingredient


class ListIngredientsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[IngredientDTO]:
        with self._uow as uow:
            ingredients = uow.ingredients.list_all()
            for ingredient in ingredients:
                ingredient.normalize()
            return [ingredient_to_dto(i) for i in ingredients]
